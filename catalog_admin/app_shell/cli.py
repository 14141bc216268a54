import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn

from catalog_admin.components.taxonomy import (
    TAXONOMY_KINDS,
    AddOptionInput,
    EnsureSeededInput,
    GetTaxonomyInput,
    RemoveOptionInput,
    TaxonomyOutput,
)
from catalog_admin.rules.loader import load_rules
from catalog_admin.services.context import ServiceContext

logger = logging.getLogger("cli")

RULES_PATH = "rules.yaml"
APP_PATH = "catalog_admin.api.main:app"


def get_context() -> ServiceContext:
    rules_path = Path(os.environ.get("CATALOG_RULES_PATH", RULES_PATH))
    if not rules_path.exists():
        logger.error("Rules file %s not found.", rules_path)
        sys.exit(1)

    rules = load_rules(rules_path)
    return ServiceContext.from_env(rules)


def _report(out: TaxonomyOutput) -> int:
    if not out.success:
        for err in out.errors:
            logger.error("%s: %s", err.code, err.message)
        return 1
    if out.taxonomy is None:
        logger.error("No taxonomy returned")
        return 1
    print(f"{out.taxonomy.tenant}")
    print(f"  brands:     {', '.join(out.taxonomy.brands) or '-'}")
    print(f"  categories: {', '.join(out.taxonomy.categories) or '-'}")
    return 0


def handle_seed(ctx: ServiceContext, args: argparse.Namespace) -> int:
    tenants = [args.tenant] if args.tenant else list(ctx.rules.tenants)
    status = 0
    for tenant in tenants:
        out = ctx.taxonomy.run(EnsureSeededInput(tenant=tenant))
        if out.success:
            print(f"{tenant}: {'seeded' if out.changed else 'already seeded'}")
        else:
            status = _report(out)
    return status


def handle_show(ctx: ServiceContext, args: argparse.Namespace) -> int:
    return _report(ctx.taxonomy.run(GetTaxonomyInput(tenant=args.tenant)))


def handle_add_option(ctx: ServiceContext, args: argparse.Namespace) -> int:
    return _report(
        ctx.taxonomy.run(AddOptionInput(tenant=args.tenant, kind=args.kind, raw_name=args.name))
    )


def handle_remove_option(ctx: ServiceContext, args: argparse.Namespace) -> int:
    return _report(
        ctx.taxonomy.run(RemoveOptionInput(tenant=args.tenant, kind=args.kind, name=args.name))
    )


def handle_serve(args: argparse.Namespace) -> int:
    uvicorn.run(APP_PATH, host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Catalog Admin CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # seed
    seed_parser = subparsers.add_parser("seed", help="Seed tenant default taxonomies")
    seed_parser.add_argument("--tenant", help="Only seed this tenant")

    # show
    show_parser = subparsers.add_parser("show", help="Show a tenant's brands and categories")
    show_parser.add_argument("tenant")

    # add-option / remove-option
    for name, help_text in (
        ("add-option", "Add a brand or category"),
        ("remove-option", "Remove a brand or category"),
    ):
        option_parser = subparsers.add_parser(name, help=help_text)
        option_parser.add_argument("tenant")
        option_parser.add_argument("kind", choices=TAXONOMY_KINDS)
        option_parser.add_argument("name")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the admin HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    return parser


HANDLERS = {
    "seed": handle_seed,
    "show": handle_show,
    "add-option": handle_add_option,
    "remove-option": handle_remove_option,
}


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        return handle_serve(args)
    ctx = get_context()
    return HANDLERS[args.command](ctx, args)


if __name__ == "__main__":
    sys.exit(main())
