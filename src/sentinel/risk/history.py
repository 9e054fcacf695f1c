"""
Historical-context evaluation.

Compares a payment with the caller-supplied scan history:
- Merchant familiarity: how often this payee was scanned before
- Amount anomaly: amount versus large-value limits and past amounts
- Timing pattern: unusual hours and rapid successive scans
- Historical-risk carryover: earlier risky outcomes for this payee

History may arrive in any order; every evaluator filters on its own.
"""

import logging
from datetime import datetime, tzinfo
from typing import Optional, Sequence

import numpy as np

from sentinel.risk.models import HistoricalTransaction, Outcome, RiskSignal
from sentinel.risk.reference import normalize_identifier

logger = logging.getLogger(__name__)


# Amount limits (INR)
HIGH_AMOUNT = 50_000
SIGNIFICANT_AMOUNT = 10_000
ROUND_AMOUNT_UNIT = 1_000
ROUND_AMOUNT_MIN = 5_000

# Statistical anomaly needs this many past amounts
MIN_AMOUNT_SAMPLES = 5

# Local hours [start, end) treated as unusual
UNUSUAL_HOUR_START = 0
UNUSUAL_HOUR_END = 6

RAPID_SCAN_WINDOW_MS = 60_000

FAMILIAR_SCAN_COUNT = 10
CONSISTENT_HISTORY_COUNT = 5


def _plural(count: int, word: str = "time") -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def _for_identifier(
    identifier: str,
    history: Sequence[HistoricalTransaction],
) -> list[HistoricalTransaction]:
    normalized = normalize_identifier(identifier)
    return [t for t in history if normalize_identifier(t.identifier) == normalized]


def evaluate_familiarity(
    identifier: str,
    history: Sequence[HistoricalTransaction],
) -> RiskSignal:
    """
    Score how familiar the user is with this payee.

    Never-seen payees add risk; a long clean history earns a bonus.
    """
    signal = RiskSignal(source="familiarity")
    previous = _for_identifier(identifier, history)
    count = len(previous)

    if count == 0:
        signal.add(15, "First time scanning this merchant")
    elif count < 3:
        signal.add(8, f"Only scanned {_plural(count)} before")
    elif count >= FAMILIAR_SCAN_COUNT:
        if not any(t.outcome == Outcome.RISKY for t in previous):
            signal.add(-10, f"Trusted merchant ({count} previous scans)")

    return signal


def evaluate_amount(
    identifier: str,
    amount: Optional[float],
    history: Sequence[HistoricalTransaction],
) -> RiskSignal:
    """
    Score the payment amount.

    The rules are additive:
    - Absolute size (over 50,000 or over 10,000)
    - Deviation from this payee's past amounts (mean + 2/3 stddev)
    - Exact round thousands above 5,000

    An absent or non-positive amount skips every rule.
    """
    signal = RiskSignal(source="amount")
    if amount is None or amount <= 0:
        return signal

    if amount > HIGH_AMOUNT:
        signal.add(20, f"High transaction amount: ₹{amount:,.0f}")
    elif amount > SIGNIFICANT_AMOUNT:
        signal.add(10, f"Significant amount: ₹{amount:,.0f}")

    past_amounts = [
        t.amount
        for t in _for_identifier(identifier, history)
        if t.amount is not None and t.amount > 0
    ]
    if len(past_amounts) >= MIN_AMOUNT_SAMPLES:
        _check_deviation(amount, past_amounts, signal)

    if amount % ROUND_AMOUNT_UNIT == 0 and amount > ROUND_AMOUNT_MIN:
        signal.add(5, "Exact round number (potential scam pattern)")

    return signal


def _check_deviation(
    amount: float,
    past_amounts: list[float],
    signal: RiskSignal,
) -> None:
    mean = float(np.mean(past_amounts))
    stddev = float(np.std(past_amounts))  # population stddev

    # Identical past amounts give no spread to measure against
    if stddev == 0:
        return

    z_score = (amount - mean) / stddev
    ratio = amount / mean

    if z_score > 3:
        points = 20 if ratio >= 3 else 15
        signal.add(
            points,
            f"Amount is {ratio:.1f}x your usual spending with this merchant "
            f"(avg: ₹{mean:,.2f})",
        )
    elif z_score > 2:
        points = 10 if ratio >= 1.5 else 8
        signal.add(
            points,
            f"Amount is higher than usual for this merchant "
            f"({ratio:.1f}x avg: ₹{mean:,.2f})",
        )


def evaluate_timing(
    timestamp_ms: Optional[int],
    history: Sequence[HistoricalTransaction],
    tz: tzinfo,
) -> RiskSignal:
    """
    Score when the payment happens.

    Args:
        timestamp_ms: Payment time (epoch millis); None skips the check
        history: All of the user's previous scans, any payee
        tz: Timezone used to derive the hour of day

    Returns:
        Signal for unusual hours and rapid successive scans
    """
    signal = RiskSignal(source="timing")
    if timestamp_ms is None:
        return signal

    hour = datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).hour
    if UNUSUAL_HOUR_START <= hour < UNUSUAL_HOUR_END:
        signal.add(8, "Unusual time (late night/early morning)")

    recent = sum(
        1
        for t in history
        if 0 <= timestamp_ms - t.timestamp_ms < RAPID_SCAN_WINDOW_MS
    )
    if recent >= 3:
        signal.add(12, "Multiple scans in quick succession")
    elif recent == 2:
        signal.add(6, "Rapid scanning detected")

    return signal


def evaluate_carryover(
    identifier: str,
    history: Sequence[HistoricalTransaction],
) -> RiskSignal:
    """Carry earlier risky outcomes for this payee into the new score."""
    signal = RiskSignal(source="carryover")
    previous = _for_identifier(identifier, history)
    risky = sum(1 for t in previous if t.outcome == Outcome.RISKY)

    if risky > 0:
        signal.add(25, f"Previously flagged as risky ({_plural(risky)})")
    elif len(previous) >= CONSISTENT_HISTORY_COUNT:
        signal.add(-15, "Consistent safe history with this merchant")

    return signal
