"""
Recommendation text for risk verdicts.
"""

from typing import Optional

from sentinel.risk.models import RiskLevel, RiskVerdict
from sentinel.risk.reference import ReferenceData, default_reference_data

RECOMMENDATIONS = {
    RiskLevel.DANGER: (
        "HIGH RISK: Do not proceed with this transaction. "
        "Multiple fraud indicators detected."
    ),
    RiskLevel.WARNING: (
        "WARNING: Exercise extreme caution. "
        "Verify merchant details before proceeding."
    ),
    RiskLevel.CAUTION: (
        "CAUTION: Some risk indicators present. "
        "Double-check transaction details."
    ),
    RiskLevel.SAFE: (
        "SAFE: No significant risk indicators detected. "
        "Transaction appears legitimate."
    ),
}

LEVEL_DESCRIPTIONS = {
    RiskLevel.DANGER: "Critical threat detected - DO NOT PROCEED",
    RiskLevel.WARNING: "Moderate risk detected - Verify before proceeding",
    RiskLevel.CAUTION: "Low risk - Proceed with caution",
    RiskLevel.SAFE: "No significant threats detected",
}


def recommend(level: RiskLevel) -> str:
    """Get the recommended action for a risk level."""
    return RECOMMENDATIONS[level]


def describe(verdict: RiskVerdict, reference: Optional[ReferenceData] = None) -> str:
    """
    Human-readable summary of a verdict.

    Prefers the fraud type description when the verdict carries a known
    fraud type, otherwise describes the level.
    """
    reference = reference or default_reference_data()
    description = reference.describe_fraud_type(verdict.fraud_type)
    if description:
        return description
    return LEVEL_DESCRIPTIONS[verdict.level]
