from __future__ import annotations

from decimal import Decimal

import pytest

from rms.domain.common.money import Money


def test_from_decimal_rounds_half_up_to_cents() -> None:
    assert Money.from_decimal(Decimal("12.345")).amount_cents == 1235
    assert Money.from_decimal("4").amount_cents == 400


def test_to_decimal_renders_two_places() -> None:
    assert Money(amount_cents=1250).to_decimal() == Decimal("12.50")
    assert str(Money(amount_cents=5).to_decimal()) == "0.05"


def test_arithmetic() -> None:
    price = Money(amount_cents=250)
    assert price.times(3) == Money(amount_cents=750)
    assert price + Money(amount_cents=50) == Money(amount_cents=300)


def test_negative_amount_rejected() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=-1)
