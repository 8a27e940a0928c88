"""Tests for the fixed-point Money type."""

import pytest

from domain.models.money import INT64_MAX, INT64_MIN, Money


class TestMoneyConstruction:
    def test_accepts_int_paisa(self):
        assert Money(1234).paisa == 1234

    @pytest.mark.parametrize("bad", [1.5, "10", None, True])
    def test_rejects_non_int(self, bad):
        with pytest.raises(TypeError):
            Money(bad)

    def test_rejects_values_outside_int64(self):
        with pytest.raises(OverflowError):
            Money(INT64_MAX + 1)
        with pytest.raises(OverflowError):
            Money(INT64_MIN - 1)

    def test_addition_overflow_is_detected(self):
        with pytest.raises(OverflowError):
            Money(INT64_MAX) + Money(1)

    def test_of_passes_money_through(self):
        m = Money(5)
        assert Money.of(m) is m
        assert Money.of(7) == Money(7)


class TestMoneyParsing:
    @pytest.mark.parametrize(
        "text,paisa",
        [("12.34", 1234), ("12.3", 1230), ("12", 1200), ("0.01", 1), ("-5.50", -550), (" 7.00 ", 700)],
    )
    def test_parse_exact(self, text, paisa):
        assert Money.parse(text) == Money(paisa)

    @pytest.mark.parametrize("text", ["1.234", "abc", "", "1,00", "1e3"])
    def test_parse_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            Money.parse(text)

    def test_str_renders_two_decimals(self):
        assert str(Money(1234)) == "12.34"
        assert str(Money(5)) == "0.05"
        assert str(Money(-550)) == "-5.50"
        assert str(Money.zero()) == "0.00"


class TestMoneyArithmetic:
    def test_add_sub_neg(self):
        assert Money(300) + Money(200) == Money(500)
        assert Money(300) - Money(500) == Money(-200)
        assert -Money(40) == Money(-40)

    def test_ordering_and_hashing(self):
        assert Money(1) < Money(2)
        assert Money(2) >= Money(2)
        assert len({Money(3), Money(3), Money(4)}) == 2

    def test_mixing_with_int_is_rejected(self):
        with pytest.raises(TypeError):
            Money(1) + 1

    def test_apply_odds_floors(self):
        # 2000 * 1.95 = 3900 exactly; 333 * 1.95 = 649.35 -> 649
        assert Money(2000).apply_odds(195) == Money(3900)
        assert Money(333).apply_odds(195) == Money(649)

    def test_scale_bp_floors(self):
        assert Money(5000).scale_bp(500) == Money(250)
        assert Money(999).scale_bp(500) == Money(49)
        assert Money(1).scale_bp(1) == Money(0)

    def test_predicates(self):
        assert Money(1).is_positive()
        assert not Money(0).is_positive()
        assert Money(-1).is_negative()
        assert not Money(0)
