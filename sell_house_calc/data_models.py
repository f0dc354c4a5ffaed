"""Data models for the sell-my-house calculator.

This module defines dataclasses representing the entities used by the
calculator: the outstanding loan, the purchase offers received for the house,
the metrics derived for each offer and the application state that ties them
together. The engine only reads ``LoanState`` and the ``amount``/``days`` of
each ``Offer``; everything else is carried along for the presentation and
storage layers.
"""

from dataclasses import dataclass, field
from typing import List

DEFAULT_PRINCIPAL = 500000.0
DEFAULT_ANNUAL_RATE = 6.0
DEFAULT_COMPOUNDING = 365.0
DEFAULT_CURRENCY = "USD"
DEFAULT_THEME = "light"
THEMES = ("light", "dark")


@dataclass(frozen=True)
class LoanState:
    """The seller's current liability.

    Attributes
    ----------
    principal: float
        Outstanding balance today.
    annual_rate_percent: float
        Nominal annual interest rate in percent (``6`` means 6 %).
    compounding_periods_per_year: float
        How many times per year interest is applied (``365`` for daily).

    Values are not validated. Non-positive values simply mean no interest
    accrues.
    """

    principal: float = DEFAULT_PRINCIPAL
    annual_rate_percent: float = DEFAULT_ANNUAL_RATE
    compounding_periods_per_year: float = DEFAULT_COMPOUNDING


@dataclass(frozen=True)
class Offer:
    """A prospective buyer's proposal.

    Attributes
    ----------
    id: str
        Opaque identifier, stable for the offer's lifetime.
    amount: float
        Gross offered purchase price.
    days: float
        Days until settlement, i.e. until the loan can be cleared.
    name: str
        Buyer label, display only.
    deposit: float
        Deposit in percent of the amount (0-100).
    notes: str
        Free-form notes.
    subject_to_finance: bool
        Whether the offer is conditional on the buyer obtaining finance.
    building_pest_inspection: bool
        Whether the offer is conditional on a building and pest inspection.
    """

    id: str
    amount: float
    days: float
    name: str = ""
    deposit: float = 0.0
    notes: str = ""
    subject_to_finance: bool = False
    building_pest_inspection: bool = False

    @property
    def display_name(self) -> str:
        return self.name.strip() if self.name and self.name.strip() else "—"

    @property
    def has_notes(self) -> bool:
        return bool(self.notes and self.notes.strip())

    @property
    def conditions(self) -> List[str]:
        """Conditions the offer is subject to, in display order."""
        conditions = []
        if self.subject_to_finance:
            conditions.append("subject to finance")
        if self.building_pest_inspection:
            conditions.append("building & pest")
        return conditions


@dataclass(frozen=True)
class OfferEvaluation:
    """Metrics derived for one offer against the loan."""

    interest_to_settle: float
    total_to_clear_loan: float
    net_vs_loan: float


@dataclass(frozen=True)
class HorizonProjection:
    """Interest accrued on the current balance over a fixed number of days."""

    days: float
    interest: float
    balance: float


@dataclass(frozen=True)
class AppState:
    """Everything the calculator keeps between sessions.

    The surrounding application owns one instance at a time; transitions in
    :mod:`sell_house_calc.state` return a new value instead of mutating it.
    """

    loan: LoanState = field(default_factory=LoanState)
    currency: str = DEFAULT_CURRENCY
    theme: str = DEFAULT_THEME
    offers: List[Offer] = field(default_factory=list)
