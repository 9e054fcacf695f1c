"""
Pytest configuration and shared fixtures for Sentinel tests.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo

import pytest

from sentinel.risk import (
    HistoricalTransaction,
    Outcome,
    ReferenceData,
    RiskPipeline,
    RiskScorer,
    default_reference_data,
)

IST = ZoneInfo("Asia/Kolkata")


def to_millis(moment: datetime) -> int:
    """Epoch milliseconds for an aware datetime."""
    return int(moment.timestamp() * 1000)


@pytest.fixture
def reference() -> ReferenceData:
    """Built-in reference data."""
    return default_reference_data()


@pytest.fixture
def pipeline() -> RiskPipeline:
    """Create a pipeline using Indian Standard Time."""
    return RiskPipeline(timezone="Asia/Kolkata")


@pytest.fixture
def scorer() -> RiskScorer:
    """Create a risk scorer for testing."""
    return RiskScorer()


@pytest.fixture
def noon() -> datetime:
    """Midday in Mumbai, outside the unusual-hours window."""
    return datetime(2024, 12, 30, 12, 0, tzinfo=IST)


@pytest.fixture
def noon_ms(noon) -> int:
    return to_millis(noon)


@pytest.fixture
def make_history(noon) -> Callable[..., list[HistoricalTransaction]]:
    """
    Build a history of scans for one identifier, one day apart,
    ending the day before the reference time.
    """

    def _make(
        identifier: str,
        count: int,
        amounts: Optional[list[float]] = None,
        outcome: Outcome = Outcome.SAFE,
        spacing: timedelta = timedelta(days=1),
    ) -> list[HistoricalTransaction]:
        return [
            HistoricalTransaction(
                identifier=identifier,
                timestamp_ms=to_millis(noon - spacing * (i + 1)),
                amount=amounts[i] if amounts else None,
                outcome=outcome,
            )
            for i in range(count)
        ]

    return _make
