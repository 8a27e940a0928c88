"""
Odds configuration and resolution.

Looks up the three configuration levels (global default, owning subadmin's
override, player discount) and hands them to the pure resolver in
domain.services.odds_resolution.
"""

import logging

from config import ODDS_MAX_MULTIPLIER, ODDS_MIN_MULTIPLIER, RATE_MAX_BP
from domain.exceptions import LedgerError, NotFound, PermissionDenied, StateError
from domain.models.game import GameType
from domain.models.odds import CommissionRate, GameOdds, OddsResolution, UserDiscount
from domain.models.user import User
from domain.services.odds_resolution import resolve_odds
from repositories.interfaces import IOddsRepository, IUserRepository
from services import error_codes
from services.interfaces import IOddsService
from services.permissions import can_set_odds, require_admin, require_can_manage

logger = logging.getLogger("matka_ledger.services.odds")


class OddsService(IOddsService):
    def __init__(
        self,
        odds_repo: IOddsRepository,
        user_repo: IUserRepository,
        min_multiplier: int | None = None,
        max_multiplier: int | None = None,
        max_rate_bp: int | None = None,
    ):
        self.odds_repo = odds_repo
        self.user_repo = user_repo
        self.min_multiplier = min_multiplier if min_multiplier is not None else ODDS_MIN_MULTIPLIER
        self.max_multiplier = max_multiplier if max_multiplier is not None else ODDS_MAX_MULTIPLIER
        self.max_rate_bp = max_rate_bp if max_rate_bp is not None else RATE_MAX_BP

    def resolve_odds(self, game_type: GameType | str, player_id: int) -> OddsResolution:
        """
        Effective multiplier for a player's bet on game_type.

        Raises:
            NotFound: If the player does not exist
            ConfigurationError: If no odds are configured for the game type
        """
        game_type = GameType.parse(game_type)
        player = self._get_user(player_id)

        override = None
        owner = self.user_repo.get_by_id(player.assigned_to) if player.assigned_to is not None else None
        if owner is not None and owner.is_subadmin:
            override = self.odds_repo.get_game_odds(game_type, subadmin_id=owner.user_id)

        return resolve_odds(
            game_type,
            global_default=self.odds_repo.get_game_odds(game_type),
            subadmin_override=override,
            discount=self.odds_repo.get_user_discount(player_id, game_type),
        )

    # --- Game odds ---

    def set_game_odds(
        self,
        scope_subadmin_id: int | None,
        game_type: GameType | str,
        multiplier: int,
        actor_id: int | None = None,
    ) -> GameOdds:
        """
        Set the global default (scope None) or a subadmin override.

        Replaces the active row; bets already placed keep their snapshot.
        """
        game_type = GameType.parse(game_type)
        self._check_multiplier(multiplier)
        if scope_subadmin_id is not None:
            self._require_subadmin(scope_subadmin_id)
        if actor_id is not None and not can_set_odds(self._get_user(actor_id), scope_subadmin_id):
            raise PermissionDenied(f"User {actor_id} may not set odds for this scope.")

        self.odds_repo.set_game_odds(game_type, multiplier, subadmin_id=scope_subadmin_id)
        scope = "global" if scope_subadmin_id is None else f"subadmin {scope_subadmin_id}"
        logger.info(f"Odds for {game_type.value} ({scope}) set to {multiplier}")
        return self.odds_repo.get_game_odds(game_type, subadmin_id=scope_subadmin_id)

    def get_game_odds(self, game_type: GameType | str, scope_subadmin_id: int | None = None) -> GameOdds | None:
        return self.odds_repo.get_game_odds(GameType.parse(game_type), subadmin_id=scope_subadmin_id)

    def list_game_odds(self, scope_subadmin_id: int | None = None) -> list[GameOdds]:
        return self.odds_repo.list_game_odds(subadmin_id=scope_subadmin_id)

    def deactivate_game_odds(
        self, scope_subadmin_id: int | None, game_type: GameType | str, actor_id: int | None = None
    ) -> bool:
        game_type = GameType.parse(game_type)
        if actor_id is not None and not can_set_odds(self._get_user(actor_id), scope_subadmin_id):
            raise PermissionDenied(f"User {actor_id} may not change odds for this scope.")
        changed = self.odds_repo.deactivate_game_odds(game_type, subadmin_id=scope_subadmin_id)
        if changed:
            logger.info(f"Odds for {game_type.value} deactivated (scope={scope_subadmin_id})")
        return changed

    # --- Player discounts ---

    def set_user_discount(
        self,
        user_id: int,
        game_type: GameType | str,
        rate_bp: int,
        actor_id: int | None = None,
    ) -> UserDiscount:
        game_type = GameType.parse(game_type)
        self._check_rate(rate_bp)
        player = self._get_user(user_id)
        if not player.is_player:
            raise StateError(f"Discounts apply to players only; user {user_id} is a {player.role.value}.")
        if actor_id is not None:
            require_can_manage(self._get_user(actor_id), player)

        self.odds_repo.set_user_discount(user_id, game_type, rate_bp)
        logger.info(f"Discount for user {user_id} on {game_type.value} set to {rate_bp}bp")
        return self.odds_repo.get_user_discount(user_id, game_type)

    def get_user_discount(self, user_id: int, game_type: GameType | str) -> UserDiscount | None:
        return self.odds_repo.get_user_discount(user_id, GameType.parse(game_type))

    def deactivate_user_discount(
        self, user_id: int, game_type: GameType | str, actor_id: int | None = None
    ) -> bool:
        game_type = GameType.parse(game_type)
        if actor_id is not None:
            require_can_manage(self._get_user(actor_id), self._get_user(user_id))
        return self.odds_repo.deactivate_user_discount(user_id, game_type)

    # --- Commission rates ---

    def set_commission_rate(
        self,
        subadmin_id: int,
        game_type: GameType | str,
        rate_bp: int,
        actor_id: int | None = None,
    ) -> CommissionRate:
        """Admin-only when an actor is given."""
        game_type = GameType.parse(game_type)
        self._check_rate(rate_bp)
        self._require_subadmin(subadmin_id)
        if actor_id is not None:
            require_admin(self._get_user(actor_id))

        self.odds_repo.set_commission_rate(subadmin_id, game_type, rate_bp)
        logger.info(f"Commission for subadmin {subadmin_id} on {game_type.value} set to {rate_bp}bp")
        return self.odds_repo.get_commission_rate(subadmin_id, game_type)

    def deactivate_commission_rate(
        self, subadmin_id: int, game_type: GameType | str, actor_id: int | None = None
    ) -> bool:
        game_type = GameType.parse(game_type)
        if actor_id is not None:
            require_admin(self._get_user(actor_id))
        return self.odds_repo.deactivate_commission_rate(subadmin_id, game_type)

    # --- Helpers ---

    def _check_multiplier(self, multiplier: int) -> None:
        if isinstance(multiplier, bool) or not isinstance(multiplier, int):
            raise ValueError("Odds multiplier must be an integer scaled by 100.")
        if not self.min_multiplier <= multiplier <= self.max_multiplier:
            raise LedgerError(
                f"Odds multiplier {multiplier} is outside {self.min_multiplier}..{self.max_multiplier}.",
                code=error_codes.OUT_OF_RANGE,
            )

    def _check_rate(self, rate_bp: int) -> None:
        if isinstance(rate_bp, bool) or not isinstance(rate_bp, int):
            raise ValueError("Rate must be an integer number of basis points.")
        if not 0 <= rate_bp <= self.max_rate_bp:
            raise LedgerError(
                f"Rate {rate_bp}bp is outside 0..{self.max_rate_bp}.",
                code=error_codes.OUT_OF_RANGE,
            )

    def _get_user(self, user_id: int) -> User:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        return user

    def _require_subadmin(self, user_id: int) -> User:
        user = self._get_user(user_id)
        if not user.is_subadmin:
            raise StateError(
                f"User {user_id} is not a subadmin.", code=error_codes.INVALID_OWNER
            )
        return user
