"""
Odds, discount and commission configuration models.
"""

from dataclasses import dataclass
from enum import Enum

from domain.models.game import GameType


class OddsSource(Enum):
    """Which level of the override hierarchy produced a multiplier."""

    GLOBAL_DEFAULT = "global_default"
    SUBADMIN_OVERRIDE = "subadmin_override"
    USER_DISCOUNT_APPLIED = "user_discount_applied"


@dataclass(frozen=True)
class GameOdds:
    """
    An odds row. subadmin_id None means the global admin default,
    otherwise it is that subadmin's override.
    """

    odds_id: int
    game_type: GameType
    multiplier: int  # scaled by 100
    subadmin_id: int | None = None
    is_active: bool = True
    updated_at: str | None = None

    @property
    def is_global(self) -> bool:
        return self.subadmin_id is None


@dataclass(frozen=True)
class UserDiscount:
    discount_id: int
    user_id: int
    game_type: GameType
    discount_bp: int  # basis points, 1000 = 10%
    is_active: bool = True


@dataclass(frozen=True)
class CommissionRate:
    commission_id: int
    subadmin_id: int
    game_type: GameType
    rate_bp: int  # basis points, 500 = 5%
    is_active: bool = True


@dataclass(frozen=True)
class OddsResolution:
    """
    Tagged result of resolving odds for one player and game type.

    base_multiplier is the global default or subadmin override before any
    discount; multiplier is what gets snapshotted into the bet.
    """

    game_type: GameType
    multiplier: int
    source: OddsSource
    base_multiplier: int
    base_source: OddsSource
    discount_bp: int = 0
