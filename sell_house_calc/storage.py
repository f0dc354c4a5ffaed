"""Persistence layer for the calculator state.

The loan parameters, currency, theme preference and offer list are stored as
one JSON document under a fixed key, the same document the browser version of
the calculator keeps in local storage. SQLite is used by default but any
SQLAlchemy-compatible URL works, which lets the web app share its state with
the command line tool.

Stored data is trusted as little as possible: a missing row, unreadable JSON
or missing fields fall back to defaults instead of failing.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .data_models import (
    DEFAULT_ANNUAL_RATE,
    DEFAULT_COMPOUNDING,
    DEFAULT_CURRENCY,
    DEFAULT_PRINCIPAL,
    DEFAULT_THEME,
    AppState,
    LoanState,
    Offer,
)
from .utils import generate_offer_id, to_flag, to_number

logger = logging.getLogger(__name__)

STORAGE_KEY = "sellMyHouseData"
DEFAULT_DATABASE_URL = "sqlite:///sell_my_house.sqlite3"

Base = declarative_base()


class StoredStateModel(Base):
    __tablename__ = "app_state"

    key = Column(String(64), primary_key=True)
    value_json = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


def state_to_dict(state: AppState) -> Dict[str, Any]:
    """Convert ``state`` into the JSON document written to storage."""
    return {
        "loanAmount": state.loan.principal,
        "annualRate": state.loan.annual_rate_percent,
        "compounding": state.loan.compounding_periods_per_year,
        "currency": state.currency,
        "theme": state.theme,
        "offers": [offer_to_dict(o) for o in state.offers],
    }


def offer_to_dict(offer: Offer) -> Dict[str, Any]:
    return {
        "id": offer.id,
        "name": offer.name,
        "amount": offer.amount,
        "days": offer.days,
        "deposit": offer.deposit,
        "notes": offer.notes,
        "subjectToFinance": offer.subject_to_finance,
        "buildingPestInspection": offer.building_pest_inspection,
    }


def _field(data: Dict[str, Any], key: str, default: Any) -> Any:
    value = data.get(key)
    return default if value is None else value


def offer_from_dict(data: Dict[str, Any]) -> Offer:
    """Build an :class:`Offer` from a stored entry, filling in missing fields."""
    offer_id = data.get("id")
    return Offer(
        id=str(offer_id) if offer_id not in (None, "") else generate_offer_id(),
        amount=to_number(data.get("amount")),
        days=to_number(data.get("days")),
        name=str(_field(data, "name", "")),
        deposit=to_number(data.get("deposit")),
        notes=str(_field(data, "notes", "")),
        subject_to_finance=to_flag(_field(data, "subjectToFinance", False)),
        building_pest_inspection=to_flag(_field(data, "buildingPestInspection", False)),
    )


def state_from_dict(data: Any) -> AppState:
    """Build an :class:`AppState` from a stored document.

    Each field that is missing or null takes its default. ``offers`` is only
    used when it is a list, and entries that are not objects are skipped.
    """
    if not isinstance(data, dict):
        logger.warning("Stored state is not an object; using defaults")
        return AppState()

    loan = LoanState(
        principal=to_number(_field(data, "loanAmount", DEFAULT_PRINCIPAL)),
        annual_rate_percent=to_number(_field(data, "annualRate", DEFAULT_ANNUAL_RATE)),
        compounding_periods_per_year=to_number(_field(data, "compounding", DEFAULT_COMPOUNDING)),
    )
    offers: List[Offer] = []
    raw_offers = data.get("offers")
    if isinstance(raw_offers, list):
        for entry in raw_offers:
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed stored offer: %r", entry)
                continue
            offers.append(offer_from_dict(entry))

    return AppState(
        loan=loan,
        currency=str(_field(data, "currency", DEFAULT_CURRENCY)),
        theme=str(_field(data, "theme", DEFAULT_THEME)),
        offers=offers,
    )


class StateStore:
    """Database-backed key-value store for :class:`AppState` documents."""

    def __init__(self, url: str) -> None:
        self._engine = create_engine(url, future=True)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)

    def load(self, key: str = STORAGE_KEY) -> AppState:
        with self._session_factory() as session:
            row: Optional[StoredStateModel] = session.get(StoredStateModel, key)
            if row is None:
                return AppState()
            raw = row.value_json
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("Failed to load stored state %r: %s", key, exc)
            return AppState()
        return state_from_dict(data)

    def save(self, state: AppState, key: str = STORAGE_KEY) -> None:
        payload = json.dumps(state_to_dict(state))
        with self._session_factory() as session:
            row = session.get(StoredStateModel, key)
            if row is None:
                session.add(StoredStateModel(key=key, value_json=payload))
            else:
                row.value_json = payload
            session.commit()
        logger.debug("Saved state %r with %d offers", key, len(state.offers))

    def clear(self, key: str = STORAGE_KEY) -> None:
        with self._session_factory() as session:
            row = session.get(StoredStateModel, key)
            if row is not None:
                session.delete(row)
                session.commit()


def create_store_from_env(url: str | None) -> StateStore:
    return StateStore(url or DEFAULT_DATABASE_URL)
