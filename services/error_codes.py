"""
Standard error codes for the ledger engine.

Every exception in domain.exceptions carries one of these codes so the
callers can map failures without parsing message text.

Usage:
    from domain.exceptions import LedgerError
    from services import error_codes

    try:
        betting_service.place_bet(...)
    except LedgerError as exc:
        if exc.code == error_codes.INSUFFICIENT_FUNDS:
            ...
"""

# General errors
NOT_FOUND = "not_found"
VALIDATION_ERROR = "validation_error"
STATE_ERROR = "state_error"
PERMISSION_DENIED = "permission_denied"

# User errors
USER_NOT_FOUND = "user_not_found"
USER_ALREADY_EXISTS = "user_already_exists"
USER_BLOCKED = "user_blocked"
INVALID_OWNER = "invalid_owner"

# Wallet errors
INSUFFICIENT_FUNDS = "insufficient_funds"
REQUEST_NOT_FOUND = "request_not_found"

# Odds / configuration errors
BETTING_UNAVAILABLE = "betting_unavailable"
OUT_OF_RANGE = "out_of_range"

# Market errors
MARKET_NOT_FOUND = "market_not_found"
MARKET_CLOSED = "market_closed"
MARKET_NOT_RESULTED = "market_not_resulted"
ALREADY_RESULTED = "already_resulted"
INVALID_RESULT = "invalid_result"

# Bet errors
INVALID_PREDICTION = "invalid_prediction"
ALREADY_SETTLED = "already_settled"
UNKNOWN_GAME_RULE = "unknown_game_rule"
