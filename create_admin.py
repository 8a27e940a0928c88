"""
Bootstrap a ledger database: create the root admin and seed the global
default odds from config.DEFAULT_GAME_ODDS.

Safe to re-run: an existing root admin is kept and only game types without
an active global default are seeded.

Usage:
  python create_admin.py
  python create_admin.py --username root --db-path path/to/matka_ledger.db
  python create_admin.py --no-seed-odds
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from config import DB_PATH, DEFAULT_GAME_ODDS, ROOT_ADMIN_USERNAME, SEED_DEFAULT_ODDS
from domain.models.game import GameType
from infrastructure.service_container import ServiceConfig, ServiceContainer

logger = logging.getLogger("matka_ledger.create_admin")


def seed_default_odds(container: ServiceContainer, defaults: dict[str, int]) -> list[str]:
    """Set global odds for every game type that has none. Returns the seeded game types."""
    seeded = []
    for key, multiplier in defaults.items():
        game_type = GameType.parse(key)
        if container.odds_service.get_game_odds(game_type) is not None:
            continue
        container.odds_service.set_game_odds(None, game_type, multiplier)
        seeded.append(game_type.value)
    return seeded


async def bootstrap(db_path: str, username: str, seed_odds: bool) -> int:
    container = ServiceContainer(ServiceConfig(db_path=db_path))
    await container.initialize()

    admin = container.user_repo.get_root_admin()
    if admin is None:
        admin = container.user_service.create_admin(username)
        print(f"Created root admin {admin.username!r} (id={admin.user_id})")
    else:
        print(f"Root admin already exists: {admin.username!r} (id={admin.user_id})")

    if seed_odds:
        seeded = seed_default_odds(container, DEFAULT_GAME_ODDS)
        if seeded:
            print(f"Seeded default odds for: {', '.join(seeded)}")
        else:
            print("Default odds already configured.")
    return 0


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Create the root admin and seed default odds.")
    parser.add_argument("--db-path", default=DB_PATH, help="Path to SQLite DB (default: DB_PATH or matka_ledger.db)")
    parser.add_argument("--username", default=ROOT_ADMIN_USERNAME, help="Root admin username")
    parser.add_argument(
        "--no-seed-odds",
        action="store_true",
        help="Skip seeding global default odds",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    try:
        return asyncio.run(bootstrap(args.db_path, args.username, SEED_DEFAULT_ODDS and not args.no_seed_odds))
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
