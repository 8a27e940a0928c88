"""
Error taxonomy for the ledger engine.

All errors derive from ValueError so callers following the repository
convention (catch ValueError, show the message) keep working.
"""

from services import error_codes


class LedgerError(ValueError):
    """Base class for every failure raised by the engine."""

    code = error_codes.VALIDATION_ERROR

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class NotFound(LedgerError):
    code = error_codes.NOT_FOUND


class PermissionDenied(LedgerError):
    code = error_codes.PERMISSION_DENIED


class StateError(LedgerError):
    code = error_codes.STATE_ERROR


class UserBlocked(LedgerError):
    code = error_codes.USER_BLOCKED


class InsufficientBalance(LedgerError):
    """The wallet cannot cover a debit. User-caused, never retried."""

    code = error_codes.INSUFFICIENT_FUNDS

    def __init__(self, user_id: int, balance: int, requested: int):
        super().__init__(
            f"Insufficient balance for user {user_id}: "
            f"have {balance} paisa, need {requested} paisa."
        )
        self.user_id = user_id
        self.balance = balance
        self.requested = requested


class ConfigurationError(LedgerError):
    """No odds are configured for a game type; betting on it is unavailable."""

    code = error_codes.BETTING_UNAVAILABLE


class MarketClosed(LedgerError):
    code = error_codes.MARKET_CLOSED


class MarketNotResulted(LedgerError):
    code = error_codes.MARKET_NOT_RESULTED


class AlreadyResulted(LedgerError):
    code = error_codes.ALREADY_RESULTED


class AlreadySettled(LedgerError):
    code = error_codes.ALREADY_SETTLED


class InvalidResultFormat(LedgerError):
    code = error_codes.INVALID_RESULT


class InvalidPrediction(LedgerError):
    code = error_codes.INVALID_PREDICTION


class UnknownGameTypeRule(LedgerError):
    """A stored bet cannot be judged. Halts that bet only."""

    code = error_codes.UNKNOWN_GAME_RULE
