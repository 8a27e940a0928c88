"""
Odds resolution domain service.

Resolves the payout multiplier for one player and game type by composing
three explicit steps:

1. base_odds: the owning subadmin's active override, else the global admin default
2. apply_discount: the player's discount raises the multiplier by its percentage
3. the tagged OddsResolution recording which step decided the value

Everything here is pure; the lookups happen in services.odds_service.
"""

from domain.exceptions import ConfigurationError
from domain.models.game import GameType
from domain.models.odds import GameOdds, OddsResolution, OddsSource, UserDiscount


def base_odds(
    game_type: GameType,
    global_default: GameOdds | None,
    subadmin_override: GameOdds | None,
) -> tuple[int, OddsSource]:
    """
    Pick the starting multiplier.

    Raises:
        ConfigurationError: If neither an override nor a global default is active
    """
    if subadmin_override is not None and subadmin_override.is_active:
        return subadmin_override.multiplier, OddsSource.SUBADMIN_OVERRIDE
    if global_default is not None and global_default.is_active:
        return global_default.multiplier, OddsSource.GLOBAL_DEFAULT
    raise ConfigurationError(f"Betting is unavailable for {game_type.value}: no odds configured.")


def apply_discount(multiplier: int, discount_bp: int) -> int:
    """Return floor(multiplier * (1 + discount)), discount in basis points."""
    return (multiplier * (10000 + discount_bp)) // 10000


def resolve_odds(
    game_type: GameType,
    global_default: GameOdds | None,
    subadmin_override: GameOdds | None = None,
    discount: UserDiscount | None = None,
) -> OddsResolution:
    """
    Resolve the effective multiplier for a bet.

    Args:
        game_type: Game being bet on
        global_default: Active admin default row for the game type, if any
        subadmin_override: Active override row of the player's owning subadmin, if any
        discount: Active discount row for the player and game type, if any

    Returns:
        OddsResolution tagged with the level that decided the multiplier

    Raises:
        ConfigurationError: If no base odds exist for the game type
    """
    base, base_source = base_odds(game_type, global_default, subadmin_override)

    discount_bp = discount.discount_bp if discount is not None and discount.is_active else 0
    if discount_bp <= 0:
        return OddsResolution(
            game_type=game_type,
            multiplier=base,
            source=base_source,
            base_multiplier=base,
            base_source=base_source,
        )

    return OddsResolution(
        game_type=game_type,
        multiplier=apply_discount(base, discount_bp),
        source=OddsSource.USER_DISCOUNT_APPLIED,
        base_multiplier=base,
        base_source=base_source,
        discount_bp=discount_bp,
    )
