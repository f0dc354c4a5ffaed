"""Core calculation engine for the sell-my-house calculator.

This module implements the financial logic used to compare purchase offers:
compound interest accrued on the outstanding loan until settlement, the net
position of each offer once the loan is cleared, and the best-first ordering
of offers. Every function is pure; inputs are never mutated and nothing is
cached between calls.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

from .data_models import HorizonProjection, LoanState, Offer, OfferEvaluation

DAYS_PER_YEAR = 365
DEFAULT_HORIZONS = (30, 60, 90)


def interest_accrued(
    principal: float, annual_rate_percent: float, days: float, periods_per_year: float
) -> float:
    """Return the compound interest accrued on ``principal`` over ``days``.

    The formula is:

        amount = P * (1 + r / m) ^ (m * t)

    where ``P`` is the principal, ``r`` the nominal annual rate as a fraction,
    ``m`` the number of compounding periods per year and ``t`` the duration in
    years (``days / 365``). The accrued interest is ``amount - P``.

    A non-positive principal, rate, day count or period count yields ``0``.
    Negative rates therefore produce no interest rather than negative
    compounding. NaN passes every guard and propagates through the formula.
    """
    r = annual_rate_percent / 100
    m = periods_per_year
    t_years = days / DAYS_PER_YEAR
    if principal <= 0 or r <= 0 or days <= 0 or m <= 0:
        return 0.0
    try:
        amount = principal * (1 + r / m) ** (m * t_years)
    except OverflowError:
        amount = math.inf
    return amount - principal


def evaluate_offer(loan: LoanState, offer: Offer) -> OfferEvaluation:
    """Compute interest to settle, total to clear the loan and net vs loan."""
    interest_to_settle = interest_accrued(
        loan.principal,
        loan.annual_rate_percent,
        offer.days,
        loan.compounding_periods_per_year,
    )
    total_to_clear_loan = loan.principal + interest_to_settle
    net_vs_loan = offer.amount - total_to_clear_loan
    return OfferEvaluation(
        interest_to_settle=interest_to_settle,
        total_to_clear_loan=total_to_clear_loan,
        net_vs_loan=net_vs_loan,
    )


def _ranking_key(net_vs_loan: float) -> Tuple[int, float]:
    # NaN cannot be compared, so those offers sort after every real net.
    if math.isnan(net_vs_loan):
        return (1, 0.0)
    return (0, -net_vs_loan)


def ranked_evaluations(
    loan: LoanState, offers: Iterable[Offer]
) -> List[Tuple[Offer, OfferEvaluation]]:
    """Return ``(offer, evaluation)`` pairs ordered best first.

    Offers are ordered by descending ``net_vs_loan``. ``sorted`` is stable,
    so offers with equal nets keep their input order.
    """
    pairs = [(offer, evaluate_offer(loan, offer)) for offer in offers]
    return sorted(pairs, key=lambda pair: _ranking_key(pair[1].net_vs_loan))


def rank_offers(loan: LoanState, offers: Sequence[Offer]) -> List[Offer]:
    """Return a new list of ``offers`` ordered by descending net vs loan.

    The first element is the top offer. The input sequence is left untouched.
    """
    return [offer for offer, _ in ranked_evaluations(loan, offers)]


def interest_horizons(
    loan: LoanState, horizons: Iterable[float] = DEFAULT_HORIZONS
) -> List[HorizonProjection]:
    """Project interest and balance on the current loan for each day count."""
    projections: List[HorizonProjection] = []
    for days in horizons:
        interest = interest_accrued(
            loan.principal,
            loan.annual_rate_percent,
            days,
            loan.compounding_periods_per_year,
        )
        projections.append(
            HorizonProjection(days=days, interest=interest, balance=loan.principal + interest)
        )
    return projections
