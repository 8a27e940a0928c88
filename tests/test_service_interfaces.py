"""Tests for service interfaces."""

from abc import ABC

import pytest

from services.interfaces import (
    IBettingService,
    ICommissionService,
    IMarketService,
    IOddsService,
    ISettlementService,
    IUserService,
    IWalletService,
)


class TestServiceInterfacesExist:
    """Test that all expected interfaces are defined."""

    @pytest.mark.parametrize(
        "interface,methods",
        [
            (IUserService, ["create_admin", "create_subadmin", "create_player", "block_user"]),
            (IWalletService, ["debit", "credit", "get_balance", "verify_ledger", "review_request"]),
            (IOddsService, ["resolve_odds", "set_game_odds", "set_user_discount", "set_commission_rate"]),
            (ICommissionService, ["get_rate", "calculate", "accrue_commission"]),
            (IMarketService, ["create_market", "close_market"]),
            (IBettingService, ["place_bet", "get_bet_history"]),
            (ISettlementService, ["declare_result", "settle_market"]),
        ],
    )
    def test_interface_methods(self, interface, methods):
        assert issubclass(interface, ABC)
        for name in methods:
            assert hasattr(interface, name), f"{interface.__name__} is missing {name}"

    def test_interfaces_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            IBettingService()


class TestServicesImplementInterfaces:
    """Concrete services satisfy their interfaces."""

    def test_concrete_services(
        self,
        user_service,
        wallet_service,
        odds_service,
        commission_service,
        market_service,
        betting_service,
        settlement_service,
    ):
        assert isinstance(user_service, IUserService)
        assert isinstance(wallet_service, IWalletService)
        assert isinstance(odds_service, IOddsService)
        assert isinstance(commission_service, ICommissionService)
        assert isinstance(market_service, IMarketService)
        assert isinstance(betting_service, IBettingService)
        assert isinstance(settlement_service, ISettlementService)
