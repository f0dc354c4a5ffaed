"""Unit tests for the interest and ranking engine"""

import math

import pytest

from sell_house_calc.data_models import LoanState, Offer
from sell_house_calc.engine import (
    evaluate_offer,
    interest_accrued,
    interest_horizons,
    rank_offers,
    ranked_evaluations,
)


def test_one_year_of_daily_compounding():
    """(1 + 0.06/365)^365 on 500k"""
    assert interest_accrued(500000, 6, 365, 365) == pytest.approx(30915.66, abs=0.01)


def test_interest_matches_formula():
    expected = 250000 * (1 + 0.045 / 12) ** (12 * (45 / 365)) - 250000
    assert interest_accrued(250000, 4.5, 45, 12) == expected


def test_zero_days_accrues_nothing():
    assert interest_accrued(500000, 6, 0, 365) == 0


@pytest.mark.parametrize("days", [0, -1, -30, -0.5])
def test_non_positive_days_accrue_nothing(days):
    assert interest_accrued(500000, 6, days, 365) == 0


@pytest.mark.parametrize(
    "principal, rate, periods",
    [
        (0, 6, 365),
        (-100000, 6, 365),
        (500000, 0, 365),
        (500000, -3, 365),
        (500000, 6, 0),
        (500000, 6, -12),
    ],
)
def test_non_positive_inputs_accrue_nothing(principal, rate, periods):
    assert interest_accrued(principal, rate, 90, periods) == 0


def test_nan_passes_guard_and_propagates():
    assert math.isnan(interest_accrued(math.nan, 6, 30, 365))
    assert math.isnan(interest_accrued(500000, math.nan, 30, 365))
    assert math.isnan(interest_accrued(500000, 6, math.nan, 365))


def test_huge_exponent_does_not_raise():
    assert interest_accrued(500000, 1000, 1e9, 1) == math.inf


def test_evaluate_offer_identities(loan):
    offer = Offer(id="a", amount=505000, days=45)
    result = evaluate_offer(loan, offer)
    assert result.total_to_clear_loan == loan.principal + result.interest_to_settle
    assert result.net_vs_loan == offer.amount - result.total_to_clear_loan


def test_evaluate_offer_ignores_opaque_fields(loan):
    plain = Offer(id="a", amount=510000, days=60)
    decorated = Offer(
        id="b",
        amount=510000,
        days=60,
        name="Jones",
        deposit=10,
        notes="Wants the curtains",
        subject_to_finance=True,
        building_pest_inspection=True,
    )
    assert evaluate_offer(loan, plain) == evaluate_offer(loan, decorated)


def test_negative_amount_gives_negative_net(loan):
    result = evaluate_offer(loan, Offer(id="a", amount=-1, days=0))
    assert result.interest_to_settle == 0
    assert result.net_vs_loan == -500001


def test_end_to_end_scenario(loan, offers):
    first = evaluate_offer(loan, offers[0])
    second = evaluate_offer(loan, offers[1])

    assert first.interest_to_settle == pytest.approx(2471.64, abs=0.01)
    assert first.net_vs_loan == pytest.approx(17528.36, abs=0.01)
    assert second.interest_to_settle == pytest.approx(7451.63, abs=0.01)
    assert second.net_vs_loan == pytest.approx(32548.37, abs=0.01)

    assert [o.id for o in rank_offers(loan, offers)] == ["2", "1"]


def test_rank_offers_returns_new_list(loan, offers):
    original = list(offers)
    ranked = rank_offers(loan, offers)
    assert ranked is not offers
    assert offers == original


def test_rank_empty():
    assert rank_offers(LoanState(), []) == []


def test_rank_is_non_increasing_and_keeps_elements(loan):
    offers = [
        Offer(id="a", amount=480000, days=10),
        Offer(id="b", amount=530000, days=120),
        Offer(id="c", amount=525000, days=0),
        Offer(id="d", amount=600000, days=365),
        Offer(id="e", amount=500000, days=5),
    ]
    ranked = rank_offers(loan, offers)

    assert sorted(o.id for o in ranked) == sorted(o.id for o in offers)
    nets = [evaluate_offer(loan, o).net_vs_loan for o in ranked]
    assert all(a >= b for a, b in zip(nets, nets[1:]))
    assert rank_offers(loan, ranked) == ranked


def test_ties_keep_input_order(loan):
    a = Offer(id="a", amount=510000, days=30)
    b = Offer(id="b", amount=510000, days=30, name="Second")
    c = Offer(id="c", amount=600000, days=30)

    assert [o.id for o in rank_offers(loan, [a, b, c])] == ["c", "a", "b"]
    assert [o.id for o in rank_offers(loan, [b, a, c])] == ["c", "b", "a"]


def test_ties_when_no_interest_accrues():
    loan = LoanState(principal=500000, annual_rate_percent=0, compounding_periods_per_year=365)
    slow = Offer(id="slow", amount=520000, days=365)
    fast = Offer(id="fast", amount=520000, days=1)
    assert rank_offers(loan, [slow, fast]) == [slow, fast]


def test_nan_net_sorts_last(loan):
    broken = Offer(id="nan", amount=math.nan, days=30)
    low = Offer(id="low", amount=400000, days=30)
    high = Offer(id="high", amount=600000, days=30)
    assert [o.id for o in rank_offers(loan, [broken, low, high])] == ["high", "low", "nan"]


def test_ranked_evaluations_pairs_offer_with_its_metrics(loan, offers):
    ranked = ranked_evaluations(loan, offers)
    for offer, evaluation in ranked:
        assert evaluation == evaluate_offer(loan, offer)


def test_interest_horizons(loan):
    horizons = interest_horizons(loan)
    assert [h.days for h in horizons] == [30, 60, 90]
    assert horizons[0].interest == pytest.approx(2471.64, abs=0.01)
    for h in horizons:
        assert h.balance == loan.principal + h.interest


def test_interest_horizons_custom_days():
    horizons = interest_horizons(LoanState(principal=0), horizons=(7,))
    assert len(horizons) == 1
    assert horizons[0].interest == 0
    assert horizons[0].balance == 0
