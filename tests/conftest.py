"""Pytest fixtures for testing"""

import pytest

from sell_house_calc.data_models import LoanState, Offer
from sell_house_calc.storage import StateStore


@pytest.fixture
def loan() -> LoanState:
    """The default loan: 500k at 6% compounded daily"""
    return LoanState(principal=500000, annual_rate_percent=6, compounding_periods_per_year=365)


@pytest.fixture
def offers() -> list[Offer]:
    return [
        Offer(id="1", amount=520000, days=30),
        Offer(id="2", amount=540000, days=90),
    ]


@pytest.fixture
def store(tmp_path) -> StateStore:
    """State store backed by a throwaway SQLite file"""
    return StateStore(f"sqlite:///{tmp_path / 'state.sqlite3'}")
