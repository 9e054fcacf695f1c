"""
Risk score aggregation and classification.

Combines evaluator signals into one verdict:
1. Sum every delta (negative bonuses included)
2. Clamp to [0, 100]
3. Classify: danger >= 60, warning >= 40, caution >= 20, else safe
4. Confidence grows with the number of reasons, capped at 95
"""

import logging
from typing import Sequence

from sentinel.risk.models import RiskLevel, RiskSignal, RiskVerdict
from sentinel.risk.recommendation import recommend

logger = logging.getLogger(__name__)


MIN_SCORE = 0
MAX_SCORE = 100

# (minimum score, level), strictest first
LEVEL_THRESHOLDS = (
    (60, RiskLevel.DANGER),
    (40, RiskLevel.WARNING),
    (20, RiskLevel.CAUTION),
)

BASE_CONFIDENCE = 50
CONFIDENCE_PER_REASON = 10
MAX_CONFIDENCE = 95

NO_THREATS_REASON = "No specific threats detected"
TRUSTED_REASON = "Verified trusted merchant"


def clamp_score(total: int) -> int:
    """Clamp a raw total into the score range."""
    return max(MIN_SCORE, min(MAX_SCORE, total))


def classify(score: int) -> RiskLevel:
    """Map a clamped score to a risk level."""
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return RiskLevel.SAFE


def calculate_confidence(reason_count: int) -> int:
    """Confidence (0-100) from the number of contributing reasons."""
    return min(BASE_CONFIDENCE + CONFIDENCE_PER_REASON * reason_count, MAX_CONFIDENCE)


class RiskScorer:
    """
    Aggregates evaluator signals into a verdict.

    Reasons keep evaluator order and are neither sorted nor deduplicated.
    The fraud type comes from the first signal that set one.
    """

    def aggregate(self, signals: Sequence[RiskSignal]) -> RiskVerdict:
        """
        Build a verdict from evaluator signals.

        Args:
            signals: Signals in the order the evaluators ran

        Returns:
            Classified verdict with recommendation
        """
        total = 0
        reasons: list[str] = []
        fraud_type = None

        for signal in signals:
            total += signal.delta
            reasons.extend(signal.reasons)
            if fraud_type is None and signal.fraud_type:
                fraud_type = signal.fraud_type

        score = clamp_score(total)
        level = classify(score)
        confidence = calculate_confidence(len(reasons))

        if not reasons:
            reasons = [NO_THREATS_REASON]

        return RiskVerdict(
            score=score,
            level=level,
            reasons=reasons,
            confidence=confidence,
            recommendation=recommend(level),
            fraud_type=fraud_type,
        )

    def trusted_verdict(self) -> RiskVerdict:
        """Verdict for a verified trusted merchant."""
        return RiskVerdict(
            score=MIN_SCORE,
            level=RiskLevel.SAFE,
            reasons=[TRUSTED_REASON],
            confidence=MAX_CONFIDENCE,
            recommendation=recommend(RiskLevel.SAFE),
        )
