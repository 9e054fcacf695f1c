"""
Data structures shared by the risk evaluators.

Inputs (history, merchant context) are supplied by the caller and
never fetched here. Outputs are plain value objects.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from sentinel.risk.reference import Severity


class Outcome(str, Enum):
    """Outcome recorded for a previous scan."""

    SAFE = "safe"
    WARNING = "warning"
    RISKY = "risky"


class RiskLevel(str, Enum):
    """Verdict classification, safest first."""

    SAFE = "safe"
    CAUTION = "caution"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class HistoricalTransaction:
    """A previous scan or payment seen by the user."""

    identifier: str
    timestamp_ms: int
    amount: Optional[float] = None
    outcome: Outcome = Outcome.SAFE


@dataclass(frozen=True)
class MerchantRecord:
    """Community reputation of a merchant, as stored by the application."""

    safety_score: int  # 0-100
    verified_reports: int = 0
    total_reports: int = 0


@dataclass(frozen=True)
class NearbyReport:
    """A fraud report filed close to where the payment is being made."""

    severity: Severity
    verified: bool = True


@dataclass
class EvaluationRequest:
    """Everything the pipeline needs to score one payment."""

    identifier: str
    amount: Optional[float] = None
    timestamp_ms: Optional[int] = None
    prior_transactions: list[HistoricalTransaction] = field(default_factory=list)
    merchant: Optional[MerchantRecord] = None
    nearby_reports: list[NearbyReport] = field(default_factory=list)
    merchant_phone: Optional[str] = None


@dataclass
class RiskSignal:
    """One evaluator's contribution to the overall score."""

    source: str
    delta: int = 0
    reasons: list[str] = field(default_factory=list)
    fraud_type: Optional[str] = None

    def add(self, points: int, reason: str) -> None:
        """Record a triggered check."""
        self.delta += points
        self.reasons.append(reason)

    @property
    def triggered(self) -> bool:
        return bool(self.reasons)


@dataclass
class RiskVerdict:
    """Aggregated, classified result of one evaluation."""

    score: int  # 0-100
    level: RiskLevel
    reasons: list[str]
    confidence: int  # 0-100
    recommendation: str
    fraud_type: Optional[str] = None

    @property
    def is_risky(self) -> bool:
        return self.score >= RISKY_THRESHOLD

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "score": self.score,
            "level": self.level.value,
            "reasons": list(self.reasons),
            "confidence": self.confidence,
            "recommendation": self.recommendation,
        }
        if self.fraud_type:
            result["fraudType"] = self.fraud_type
        return result


# Scores at or above this are flagged as risky
RISKY_THRESHOLD = 40
