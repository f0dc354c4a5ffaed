"""Tests for the SQLAlchemy-backed state store"""

import json

from sqlalchemy.orm import Session

from sell_house_calc.data_models import AppState, LoanState, Offer
from sell_house_calc.storage import (
    STORAGE_KEY,
    StateStore,
    StoredStateModel,
    state_from_dict,
    state_to_dict,
)


def _write_raw(store: StateStore, payload: str) -> None:
    with Session(store._engine) as session:
        session.merge(StoredStateModel(key=STORAGE_KEY, value_json=payload))
        session.commit()


def test_empty_store_gives_defaults(store):
    loaded = store.load()
    assert loaded == AppState()
    assert loaded.loan == LoanState(500000, 6, 365)
    assert loaded.currency == "USD"
    assert loaded.theme == "light"
    assert loaded.offers == []


def test_save_then_load(store):
    app_state = AppState(
        loan=LoanState(350000, 5.5, 12),
        currency="AUD",
        theme="dark",
        offers=[
            Offer(id="x1", amount=400000, days=42, name="Lee", deposit=10, notes="n", subject_to_finance=True),
            Offer(id="x2", amount=390000, days=14, building_pest_inspection=True),
        ],
    )
    store.save(app_state)
    assert store.load() == app_state

    store.save(AppState(theme="dark"))
    assert store.load() == AppState(theme="dark")


def test_stored_document_uses_browser_keys():
    document = state_to_dict(AppState(offers=[Offer(id="1", amount=1, days=2, subject_to_finance=True)]))
    assert set(document) == {"loanAmount", "annualRate", "compounding", "currency", "theme", "offers"}
    assert document["offers"][0]["subjectToFinance"] is True
    assert "buildingPestInspection" in document["offers"][0]


def test_partial_document_falls_back_per_field(store):
    _write_raw(store, json.dumps({"annualRate": 4.2, "currency": "EUR", "loanAmount": None}))
    loaded = store.load()
    assert loaded.loan == LoanState(500000, 4.2, 365)
    assert loaded.currency == "EUR"
    assert loaded.theme == "light"
    assert loaded.offers == []


def test_invalid_json_falls_back_to_defaults(store, caplog):
    _write_raw(store, "{not json")
    assert store.load() == AppState()
    assert "Failed to load stored state" in caplog.text


def test_non_object_document_falls_back_to_defaults(store):
    _write_raw(store, json.dumps([1, 2, 3]))
    assert store.load() == AppState()


def test_offers_must_be_a_list():
    loaded = state_from_dict({"offers": {"id": "1"}})
    assert loaded.offers == []


def test_malformed_offers_are_skipped_and_filled_in():
    loaded = state_from_dict(
        {
            "offers": [
                "garbage",
                {"id": 7, "amount": "510000", "days": 21},
                {"amount": 1},
            ]
        }
    )
    assert len(loaded.offers) == 2
    first, second = loaded.offers
    assert first.id == "7"
    assert first.amount == 510000
    assert first.days == 21
    assert first.name == ""
    assert first.deposit == 0
    assert first.subject_to_finance is False
    assert second.id
    assert second.days == 0


def test_clear(store):
    store.save(AppState(currency="GBP"))
    store.clear()
    assert store.load() == AppState()
