from decimal import Decimal

import pytest

from quickride.core.errors import ValidationDecline
from quickride.services.dividends import allocate_proportionally, clamp_gst_rate, compute_payout


def test_compute_payout_deducts_gst() -> None:
    breakdown = compute_payout(Decimal("1000"), Decimal("18"))
    assert breakdown.gross == Decimal("1000.00")
    assert breakdown.gst_amount == Decimal("180.00")
    assert breakdown.net == Decimal("820.00")


def test_compute_payout_rounds_half_up() -> None:
    breakdown = compute_payout(Decimal("10.05"), Decimal("5"))
    # 10.05 * 5% = 0.5025
    assert breakdown.gst_amount == Decimal("0.50")
    assert breakdown.net == Decimal("9.55")


def test_negative_gst_rate_is_treated_as_zero() -> None:
    assert clamp_gst_rate("-3") == Decimal("0")
    breakdown = compute_payout(250, -3)
    assert breakdown.gst_amount == Decimal("0.00")
    assert breakdown.net == Decimal("250.00")


def test_allocation_follows_share_ratio() -> None:
    allocations = allocate_proportionally(Decimal("100"), [(1, 1), (2, 3), (3, 6)], Decimal("0"))
    assert [item.breakdown.gross for item in allocations] == [
        Decimal("10.00"),
        Decimal("30.00"),
        Decimal("60.00"),
    ]


def test_rounding_remainder_is_not_redistributed() -> None:
    allocations = allocate_proportionally(Decimal("100"), [(1, 1), (2, 1), (3, 1)], Decimal("0"))
    grosses = [item.breakdown.gross for item in allocations]
    assert grosses == [Decimal("33.33")] * 3
    assert sum(grosses) == Decimal("99.99")


def test_allocation_without_shares_is_declined() -> None:
    with pytest.raises(ValidationDecline) as excinfo:
        allocate_proportionally(Decimal("100"), [(1, 0), (2, 0)], Decimal("0"))
    assert excinfo.value.reason == "no_shares"


@pytest.mark.parametrize("gross", [Decimal("1e30"), Decimal("10000000000000000"), Decimal("NaN")])
def test_unstorable_gross_is_declined(gross: Decimal) -> None:
    with pytest.raises(ValidationDecline):
        compute_payout(gross, 0)


def test_gst_rate_outside_column_range_is_declined() -> None:
    with pytest.raises(ValidationDecline):
        clamp_gst_rate("1000")
    assert clamp_gst_rate("999.9999") == Decimal("999.9999")


def test_unstorable_bulk_total_is_declined() -> None:
    with pytest.raises(ValidationDecline):
        allocate_proportionally(Decimal("1e30"), [(1, 1)], Decimal("0"))
