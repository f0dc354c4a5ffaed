"""Application state transitions.

Each function takes the current :class:`AppState` and returns a new one. When
input is rejected an :class:`InvalidInputError` is raised before anything is
built, so the caller's state is left exactly as it was.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional

from .data_models import (
    DEFAULT_CURRENCY,
    THEMES,
    AppState,
    LoanState,
    Offer,
)
from .utils import (
    InvalidInputError,
    generate_offer_id,
    to_flag,
    to_number,
    validate_non_negative,
    validate_percentage,
)

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = ("amount", "days")
FLAG_FIELDS = ("subject_to_finance", "building_pest_inspection")
TEXT_FIELDS = ("name", "notes")
EDITABLE_FIELDS = NUMERIC_FIELDS + ("deposit",) + FLAG_FIELDS + TEXT_FIELDS


def update_loan(
    state: AppState,
    principal: Any = None,
    annual_rate: Any = None,
    compounding: Any = None,
) -> AppState:
    """Replace the loan parameters that were supplied.

    Values go through :func:`to_number` only; the engine copes with zero or
    negative values, so no range check is applied here.
    """
    loan = state.loan
    changes = {}
    if principal is not None:
        changes["principal"] = to_number(principal)
    if annual_rate is not None:
        changes["annual_rate_percent"] = to_number(annual_rate)
    if compounding is not None:
        changes["compounding_periods_per_year"] = to_number(compounding)
    if not changes:
        return state
    logger.debug("Updating loan: %s", changes)
    return dataclasses.replace(state, loan=dataclasses.replace(loan, **changes))


def set_currency(state: AppState, code: str) -> AppState:
    code = (code or DEFAULT_CURRENCY).strip().upper()
    return dataclasses.replace(state, currency=code or DEFAULT_CURRENCY)


def set_theme(state: AppState, theme: str) -> AppState:
    theme = (theme or "").strip().lower()
    if theme not in THEMES:
        raise InvalidInputError(f"Theme must be one of: {', '.join(THEMES)}.")
    return dataclasses.replace(state, theme=theme)


def toggle_theme(state: AppState) -> AppState:
    return set_theme(state, "dark" if state.theme == "light" else "light")


def add_offer(
    state: AppState,
    amount: Any,
    days: Any,
    name: str = "",
    deposit: Any = None,
    notes: str = "",
    subject_to_finance: bool = False,
    building_pest_inspection: bool = False,
) -> AppState:
    """Validate a new offer and append it to the offer list.

    ``deposit`` is optional: ``None`` or blank text means 0 %, anything else
    must be a percentage between 0 and 100.
    """
    amount_value = validate_non_negative(amount, "Offer amount")
    days_value = validate_non_negative(days, "Settlement days")
    deposit_value = 0.0
    if deposit is not None and str(deposit).strip() != "":
        deposit_value = validate_percentage(deposit, "Deposit percentage")

    offer = Offer(
        id=generate_offer_id(),
        amount=amount_value,
        days=days_value,
        name=(name or "").strip(),
        deposit=deposit_value,
        notes=(notes or "").strip(),
        subject_to_finance=bool(subject_to_finance),
        building_pest_inspection=bool(building_pest_inspection),
    )
    logger.debug("Adding offer %s (%s in %s days)", offer.id, offer.amount, offer.days)
    return dataclasses.replace(state, offers=[*state.offers, offer])


def find_offer(state: AppState, offer_id: Any) -> Optional[Offer]:
    for offer in state.offers:
        if str(offer.id) == str(offer_id):
            return offer
    return None


def remove_offer(state: AppState, offer_id: Any) -> AppState:
    """Drop the offer with ``offer_id``; unknown ids leave the state unchanged."""
    offers = [o for o in state.offers if str(o.id) != str(offer_id)]
    if len(offers) == len(state.offers):
        return state
    logger.debug("Removing offer %s", offer_id)
    return dataclasses.replace(state, offers=offers)


def update_offer_field(state: AppState, offer_id: Any, field: str, value: Any) -> AppState:
    """Edit a single field of an existing offer.

    ``amount`` and ``days`` must be non-negative, ``deposit`` must be within
    0-100. Flags accept checkbox-style values; ``name`` and ``notes`` take the
    text as entered.
    """
    if field not in EDITABLE_FIELDS:
        raise InvalidInputError(
            f"Unknown offer field '{field}'; expected one of: {', '.join(EDITABLE_FIELDS)}."
        )
    offer = find_offer(state, offer_id)
    if offer is None:
        return state

    if field == "amount":
        new_value: Any = validate_non_negative(value, "Offer amount")
    elif field == "days":
        new_value = validate_non_negative(value, "Settlement days")
    elif field == "deposit":
        new_value = validate_percentage(value, "Deposit percentage")
    elif field in FLAG_FIELDS:
        new_value = to_flag(value)
    else:
        new_value = "" if value is None else str(value)

    updated = dataclasses.replace(offer, **{field: new_value})
    offers = [updated if o is offer else o for o in state.offers]
    return dataclasses.replace(state, offers=offers)


def reset(state: AppState) -> AppState:
    """Restore the default loan, currency and an empty offer list.

    The theme preference is kept.
    """
    return AppState(loan=LoanState(), currency=DEFAULT_CURRENCY, theme=state.theme, offers=[])

