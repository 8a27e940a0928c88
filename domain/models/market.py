"""
Market / match domain model.
"""

from dataclasses import dataclass
from enum import Enum

from domain.models.game import GameType, MarketKind


class MarketStatus(Enum):
    """Open -> Closed -> Resulted, never backwards."""

    OPEN = "open"
    CLOSED = "closed"
    RESULTED = "resulted"


@dataclass
class Market:
    """A satamatka market, team match, cricket toss or coin-flip round."""

    market_id: int
    name: str
    kind: MarketKind
    status: MarketStatus
    result: str | None = None
    created_at: str | None = None
    closed_at: str | None = None
    resulted_at: str | None = None

    @property
    def is_open(self) -> bool:
        return self.status is MarketStatus.OPEN

    @property
    def is_resulted(self) -> bool:
        return self.status is MarketStatus.RESULTED

    def accepts(self, game_type: GameType) -> bool:
        return game_type in self.kind.game_types
