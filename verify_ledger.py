"""
Audit the wallet ledger: replay every user's transaction log and compare the
result with the cached balance.

Read-only. Exit status is 0 when every wallet is consistent, 1 otherwise.

Usage:
  python verify_ledger.py
  python verify_ledger.py --user-id 42 --verbose
  python verify_ledger.py --db-path path/to/matka_ledger.db
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from config import DB_PATH
from domain.models.wallet import LedgerCheck
from repositories.user_repository import UserRepository
from repositories.wallet_repository import WalletRepository
from services.wallet_service import WalletService


def _print_report(checks: list[LedgerCheck], *, verbose: bool) -> int:
    mismatched = [c for c in checks if not c.consistent]

    print(f"Wallets checked: {len(checks)}")
    print(f"Wallets inconsistent: {len(mismatched)}")

    for c in checks if verbose else mismatched:
        marker = "OK " if c.consistent else "BAD"
        print(
            f"- [{marker}] user {c.user_id}: cached {c.cached_balance}, "
            f"replayed {c.replayed_balance} ({c.transaction_count} transactions)"
        )
    return len(mismatched)


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Replay wallet transaction logs against cached balances.")
    parser.add_argument("--db-path", default=DB_PATH, help="Path to SQLite DB (default: DB_PATH or matka_ledger.db)")
    parser.add_argument("--user-id", type=int, help="Check a single user")
    parser.add_argument("--verbose", action="store_true", help="Print every wallet, not just mismatches")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    if not os.path.exists(args.db_path):
        print(f"ERROR: Database file not found: {args.db_path}", file=sys.stderr)
        return 2

    wallet_service = WalletService(
        wallet_repo=WalletRepository(args.db_path),
        user_repo=UserRepository(args.db_path),
    )

    if args.user_id is not None:
        checks = [wallet_service.verify_ledger(args.user_id)]
    else:
        checks = wallet_service.verify_all()

    return 1 if _print_report(checks, verbose=args.verbose) else 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
