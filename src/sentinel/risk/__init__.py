"""
Risk scoring core for UPI payee identifiers.

Provides:
- Identifier screening (blacklist, keywords, patterns, format)
- Historical-context evaluation (familiarity, amount, timing, carryover)
- Context evaluation (merchant reputation, nearby reports, phone)
- Score aggregation, classification and recommendations
"""

from sentinel.risk.exceptions import InvalidArgumentError, ReferenceDataError
from sentinel.risk.models import (
    EvaluationRequest,
    HistoricalTransaction,
    MerchantRecord,
    NearbyReport,
    Outcome,
    RiskLevel,
    RiskSignal,
    RiskVerdict,
)
from sentinel.risk.pipeline import RiskPipeline, evaluate
from sentinel.risk.recommendation import describe, recommend
from sentinel.risk.reference import (
    ReferenceData,
    ReferenceEntry,
    Severity,
    default_reference_data,
    load_reference_data,
)
from sentinel.risk.scorer import RiskScorer

__all__ = [
    # Pipeline
    "RiskPipeline",
    "evaluate",
    "RiskScorer",
    "recommend",
    "describe",
    # Models
    "EvaluationRequest",
    "HistoricalTransaction",
    "MerchantRecord",
    "NearbyReport",
    "Outcome",
    "RiskLevel",
    "RiskSignal",
    "RiskVerdict",
    # Reference data
    "ReferenceData",
    "ReferenceEntry",
    "Severity",
    "default_reference_data",
    "load_reference_data",
    # Errors
    "InvalidArgumentError",
    "ReferenceDataError",
]
