#!/usr/bin/env python
"""CLI utility to create the default system-managed roles."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from roles_permissions.core.database import create_schema, session_scope
from roles_permissions.services.seeding import seed_system_roles


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed default system-managed roles.")
    parser.add_argument("--create-schema", action="store_true", help="Create tables before seeding.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.create_schema:
        create_schema()

    with session_scope() as session:
        created = seed_system_roles(session)

    if created:
        logging.info("Created system roles: %s", ", ".join(created))
    else:
        logging.info("System roles already present, nothing to seed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
