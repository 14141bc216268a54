import logging
import os
from collections.abc import Mapping

from catalog_admin.rules.models import Rules
from catalog_admin.services.context import (
    HOST_CLOUDINARY,
    STORE_FIRESTORE,
    ConfigurationError,
)

logger = logging.getLogger(__name__)

BACKEND_ENV: dict[tuple[str, str], list[str]] = {
    ("CATALOG_ASSET_HOST", HOST_CLOUDINARY): ["CLOUDINARY_CLOUD_NAME", "CLOUDINARY_UPLOAD_PRESET"],
    ("CATALOG_STORE", STORE_FIRESTORE): ["GOOGLE_CLOUD_PROJECT"],
}


def validate_ops_rules(rules: Rules, env: Mapping[str, str] | None = None) -> None:
    """
    Validate operational requirements before startup.
    Raises ConfigurationError listing every missing variable.
    """
    env = os.environ if env is None else env

    # 1. Required env from rules
    missing = [name for name in rules.ops.required_env if name not in env]

    # 2. Env implied by the selected backends
    for (selector, value), needed in BACKEND_ENV.items():
        if env.get(selector) == value:
            missing.extend(name for name in needed if not env.get(name) and name not in missing)

    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    logger.info("Configuration validated")
