"""
Context evaluators fed by the application's stored data.

The application looks these up (merchant reputation, reports near the
payment location, the merchant's phone number) and passes them in.
Each evaluator fires at most one rule, strongest first.
"""

import re
from typing import Optional, Sequence

from sentinel.risk.models import MerchantRecord, NearbyReport, RiskSignal
from sentinel.risk.reference import Severity


def evaluate_merchant_reputation(merchant: Optional[MerchantRecord]) -> RiskSignal:
    """Score a merchant's community safety record."""
    signal = RiskSignal(source="reputation")
    if merchant is None:
        return signal

    if merchant.safety_score < 40:
        signal.add(
            40,
            f"This merchant has a very low safety score ({merchant.safety_score}/100) "
            f"with {merchant.verified_reports} verified fraud reports",
        )
        signal.fraud_type = "fake_merchant"
    elif merchant.safety_score < 60:
        signal.add(
            25,
            f"This merchant has a low safety score ({merchant.safety_score}/100)",
        )
    elif merchant.total_reports > 5:
        signal.add(
            15,
            f"This merchant has {merchant.total_reports} community reports",
        )

    return signal


def evaluate_nearby_reports(reports: Sequence[NearbyReport]) -> RiskSignal:
    """Score the density of verified fraud reports around the payment location."""
    signal = RiskSignal(source="location")
    verified = [r for r in reports if r.verified]
    if not verified:
        return signal

    critical = sum(1 for r in verified if r.severity == Severity.CRITICAL)
    high = sum(1 for r in verified if r.severity == Severity.HIGH)

    if critical > 0:
        signal.add(35, f"{critical} critical fraud reports in this area recently")
    elif high > 2:
        signal.add(25, f"{high} high-severity fraud reports nearby")
    elif len(verified) > 3:
        signal.add(15, f"{len(verified)} fraud reports in this area")

    return signal


REPEATED_DIGITS = re.compile(r"(\d)\1{6,}")


def evaluate_phone(phone: Optional[str]) -> RiskSignal:
    """Score the merchant's phone number."""
    signal = RiskSignal(source="phone")
    if not phone:
        return signal

    digits = re.sub(r"\D", "", phone)
    if len(digits) < 10:
        signal.add(15, "Phone number appears incomplete")
    elif REPEATED_DIGITS.search(digits):
        signal.add(25, "Phone number has suspicious repeated digits")

    return signal
