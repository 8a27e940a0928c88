"""
Game type and market kind enumerations.
"""

from enum import Enum


class GameType(Enum):
    """Bettable game types. Each has its own odds and prediction rule."""

    COIN_FLIP = "coin_flip"
    CRICKET_TOSS = "cricket_toss"
    TEAM_MATCH = "team_match"
    SATAMATKA_JODI = "satamatka_jodi"
    SATAMATKA_HARF = "satamatka_harf"
    SATAMATKA_CROSSING = "satamatka_crossing"
    SATAMATKA_ODD_EVEN = "satamatka_odd_even"

    @classmethod
    def parse(cls, value: "GameType | str") -> "GameType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown game type: {value!r}") from None


class MarketKind(Enum):
    """What a market/match is; determines its result format and game types."""

    COIN_FLIP = "coin_flip"
    CRICKET_TOSS = "cricket_toss"
    TEAM_MATCH = "team_match"
    SATAMATKA = "satamatka"

    @classmethod
    def parse(cls, value: "MarketKind | str") -> "MarketKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown market kind: {value!r}") from None

    @property
    def game_types(self) -> frozenset[GameType]:
        return MARKET_GAME_TYPES[self]


MARKET_GAME_TYPES: dict[MarketKind, frozenset[GameType]] = {
    MarketKind.COIN_FLIP: frozenset({GameType.COIN_FLIP}),
    MarketKind.CRICKET_TOSS: frozenset({GameType.CRICKET_TOSS}),
    MarketKind.TEAM_MATCH: frozenset({GameType.TEAM_MATCH}),
    MarketKind.SATAMATKA: frozenset(
        {
            GameType.SATAMATKA_JODI,
            GameType.SATAMATKA_HARF,
            GameType.SATAMATKA_CROSSING,
            GameType.SATAMATKA_ODD_EVEN,
        }
    ),
}
