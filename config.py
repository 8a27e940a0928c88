"""
Centralized configuration for the Matka Ledger engine.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


DB_PATH = os.getenv("DB_PATH", "matka_ledger.db")
DB_BUSY_TIMEOUT_MS = _parse_int("DB_BUSY_TIMEOUT_MS", 5000)

# All amounts are in paisa (1/100 of the display unit)
STARTING_BALANCE = _parse_int("STARTING_BALANCE", 1000)  # 10.00

# Odds multipliers are scaled by 100 (195 = 1.95x)
ODDS_MIN_MULTIPLIER = _parse_int("ODDS_MIN_MULTIPLIER", 100)
ODDS_MAX_MULTIPLIER = _parse_int("ODDS_MAX_MULTIPLIER", 10000)

# Discount and commission rates are basis points (percentage scaled by 100)
RATE_MAX_BP = max(0, min(10000, _parse_int("RATE_MAX_BP", 10000)))

BET_HISTORY_PAGE_SIZE = _parse_int("BET_HISTORY_PAGE_SIZE", 50)
TRANSACTION_HISTORY_PAGE_SIZE = _parse_int("TRANSACTION_HISTORY_PAGE_SIZE", 50)

# Admin defaults seeded by create_admin.py
DEFAULT_GAME_ODDS: dict[str, int] = {
    "coin_flip": _parse_int("ODDS_COIN_FLIP", 195),
    "cricket_toss": _parse_int("ODDS_CRICKET_TOSS", 190),
    "team_match": _parse_int("ODDS_TEAM_MATCH", 190),
    "satamatka_jodi": _parse_int("ODDS_SATAMATKA_JODI", 9000),
    "satamatka_harf": _parse_int("ODDS_SATAMATKA_HARF", 900),
    "satamatka_crossing": _parse_int("ODDS_SATAMATKA_CROSSING", 900),
    "satamatka_odd_even": _parse_int("ODDS_SATAMATKA_ODD_EVEN", 180),
}

ROOT_ADMIN_USERNAME = os.getenv("ROOT_ADMIN_USERNAME", "admin")
SEED_DEFAULT_ODDS = _parse_bool("SEED_DEFAULT_ODDS", True)
