"""
Prediction matching rules.

One table, keyed by game type, used both when a bet is placed (validate)
and when it is settled (wins). Every rule is a pair of pure functions.
"""

import re
from dataclasses import dataclass
from typing import Callable

from domain.exceptions import InvalidPrediction, InvalidResultFormat, UnknownGameTypeRule
from domain.models.game import GameType, MarketKind

COIN_SIDES = frozenset({"heads", "tails"})
TOSS_SIDES = frozenset({"team_a", "team_b"})
MATCH_OUTCOMES = frozenset({"team_a", "team_b", "draw"})
PARITIES = frozenset({"odd", "even"})

_TWO_DIGITS = re.compile(r"^[0-9]{2}$")
_HARF = re.compile(r"^([LR]?)([0-9])$")
_CROSSING = re.compile(r"^[0-9](,[0-9])*$")


@dataclass(frozen=True)
class PredictionRule:
    """validate(prediction) and wins(prediction, result) for one game type."""

    description: str
    validate: Callable[[str], bool]
    wins: Callable[[str, str], bool]


def _exact(prediction: str, result: str) -> bool:
    return prediction == result


def _harf_wins(prediction: str, result: str) -> bool:
    position, digit = _HARF.match(prediction).groups()
    if position == "L":
        return result[0] == digit
    if position == "R":
        return result[1] == digit
    return digit in (result[0], result[1])


def _crossing_digits(prediction: str) -> set[str]:
    return set(prediction.split(","))


def _crossing_wins(prediction: str, result: str) -> bool:
    digits = _crossing_digits(prediction)
    return result[0] in digits or result[1] in digits


def _odd_even_wins(prediction: str, result: str) -> bool:
    is_odd = int(result) % 2 == 1
    return prediction == ("odd" if is_odd else "even")


PREDICTION_RULES: dict[GameType, PredictionRule] = {
    GameType.COIN_FLIP: PredictionRule(
        description="heads or tails",
        validate=lambda p: p in COIN_SIDES,
        wins=_exact,
    ),
    GameType.CRICKET_TOSS: PredictionRule(
        description="team_a or team_b",
        validate=lambda p: p in TOSS_SIDES,
        wins=_exact,
    ),
    GameType.TEAM_MATCH: PredictionRule(
        description="team_a, team_b or draw",
        validate=lambda p: p in MATCH_OUTCOMES,
        wins=_exact,
    ),
    GameType.SATAMATKA_JODI: PredictionRule(
        description="two digits 00-99, exact match",
        validate=lambda p: bool(_TWO_DIGITS.match(p)),
        wins=_exact,
    ),
    GameType.SATAMATKA_HARF: PredictionRule(
        description="L<digit> (first), R<digit> (second) or <digit> (either position)",
        validate=lambda p: bool(_HARF.match(p)),
        wins=_harf_wins,
    ),
    GameType.SATAMATKA_CROSSING: PredictionRule(
        description="comma-separated distinct digits, any digit of the result",
        validate=lambda p: bool(_CROSSING.match(p)) and len(_crossing_digits(p)) == len(p.split(",")),
        wins=_crossing_wins,
    ),
    GameType.SATAMATKA_ODD_EVEN: PredictionRule(
        description="odd or even parity of the result",
        validate=lambda p: p in PARITIES,
        wins=_odd_even_wins,
    ),
}

_GAME_TYPE_KINDS: dict[GameType, MarketKind] = {
    game_type: kind for kind in MarketKind for game_type in kind.game_types
}

RESULT_VALIDATORS: dict[MarketKind, Callable[[str], bool]] = {
    MarketKind.COIN_FLIP: lambda r: r in COIN_SIDES,
    MarketKind.CRICKET_TOSS: lambda r: r in TOSS_SIDES,
    MarketKind.TEAM_MATCH: lambda r: r in MATCH_OUTCOMES,
    MarketKind.SATAMATKA: lambda r: bool(_TWO_DIGITS.match(r)),
}


def normalize_prediction(prediction: str) -> str:
    """Strip whitespace and lowercase word predictions; harf L/R stays uppercase."""
    cleaned = prediction.strip().replace(" ", "")
    if len(cleaned) == 2 and cleaned[0] in "lLrR" and cleaned[1].isdigit():
        return cleaned.upper()
    return cleaned.lower()


def validate_prediction(game_type: GameType, prediction: str) -> str:
    """
    Check a prediction at placement time.

    Returns:
        The normalized prediction that gets stored on the bet

    Raises:
        InvalidPrediction: If the prediction does not fit the game type's rule
    """
    rule = PREDICTION_RULES.get(game_type)
    if rule is None:
        raise InvalidPrediction(f"Betting on {game_type.value} is not supported.")
    normalized = normalize_prediction(prediction or "")
    if not rule.validate(normalized):
        raise InvalidPrediction(
            f"Invalid prediction {prediction!r} for {game_type.value}: expected {rule.description}."
        )
    return normalized


def validate_result(kind: MarketKind, result: str) -> str:
    """
    Check a declared result against the market kind's format.

    Raises:
        InvalidResultFormat: If the result is malformed
    """
    normalized = (result or "").strip().lower()
    validator = RESULT_VALIDATORS.get(kind)
    if validator is None or not validator(normalized):
        raise InvalidResultFormat(f"Invalid result {result!r} for a {kind.value} market.")
    return normalized


def judge(game_type: GameType, prediction: str, result: str) -> bool:
    """
    Decide whether a stored prediction wins against a declared result.

    Raises:
        UnknownGameTypeRule: If there is no rule for the game type or the stored
            prediction does not satisfy it
    """
    rule = PREDICTION_RULES.get(game_type)
    if rule is None:
        raise UnknownGameTypeRule(f"No settlement rule for game type {game_type!r}.")
    if not rule.validate(prediction):
        raise UnknownGameTypeRule(
            f"Stored prediction {prediction!r} does not match the {game_type.value} rule."
        )
    kind = _GAME_TYPE_KINDS[game_type]
    if not RESULT_VALIDATORS[kind](result):
        raise UnknownGameTypeRule(f"Result {result!r} cannot judge a {game_type.value} bet.")
    return rule.wins(prediction, result)
