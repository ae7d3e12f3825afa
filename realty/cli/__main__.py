# realty/cli/__main__.py
from __future__ import annotations

import argparse

from realty.cli.seed_demo import seed_demo
from realty.db import init_db
from realty.logging_config import configure_logging


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(prog="python -m realty.cli")
    p.add_argument("--log-level", default=None)
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create all catalog tables on the configured database")

    seed = sub.add_parser("seed-demo", help="create a demo working area, property and unit")
    seed.add_argument("--area-name", default="Zone1")
    seed.add_argument("--property-name", default="P1")
    seed.add_argument("--no-sample-unit", action="store_true")

    args = p.parse_args(argv)
    configure_logging(level=args.log_level, fmt="text")

    if args.command == "init-db":
        init_db()
        print({"ok": True, "command": "init-db"})
        return

    init_db()
    out = seed_demo(
        area_name=args.area_name,
        property_name=args.property_name,
        create_sample_unit=(not args.no_sample_unit),
    )
    print(
        {
            "ok": True,
            "working_area_id": out.working_area_id,
            "property_id": out.property_id,
            "unit_id": out.unit_id,
        }
    )


if __name__ == "__main__":
    main()
