"""
Local asset serving.

Only active when uploads go to the local file-system host; stored names are
random and never rewritten, so responses are cached as immutable.
"""

import mimetypes

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from catalog_admin.adapters.fs.asset_host import LocalAssetHost
from catalog_admin.api.deps import get_context
from catalog_admin.services.context import ServiceContext

router = APIRouter()

CACHE_MAX_AGE = 31536000  # 365 days in seconds
CACHE_CONTROL_IMMUTABLE = f"public, max-age={CACHE_MAX_AGE}, immutable"


@router.get("/{name}")
def get_asset(name: str, ctx: ServiceContext = Depends(get_context)) -> Response:
    host = ctx.asset_host
    if not isinstance(host, LocalAssetHost):
        raise HTTPException(status_code=404, detail="Asset not found")
    try:
        data = host.get(name)
    except (FileNotFoundError, ValueError) as err:
        raise HTTPException(status_code=404, detail="Asset not found") from err

    media_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
    return Response(
        content=data,
        media_type=media_type,
        headers={"Cache-Control": CACHE_CONTROL_IMMUTABLE},
    )
