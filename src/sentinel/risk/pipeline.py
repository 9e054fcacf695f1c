"""
Risk evaluation pipeline.

Runs every evaluator over one payment and aggregates the result.
Pure computation: history and merchant context are fetched by the
caller beforehand, and reference data is read-only, so one pipeline
can serve concurrent requests.
"""

import logging
import math
from datetime import datetime, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from sentinel.risk.context import (
    evaluate_merchant_reputation,
    evaluate_nearby_reports,
    evaluate_phone,
)
from sentinel.risk.exceptions import InvalidArgumentError
from sentinel.risk.history import (
    evaluate_amount,
    evaluate_carryover,
    evaluate_familiarity,
    evaluate_timing,
)
from sentinel.risk.identifier import evaluate_pattern
from sentinel.risk.models import (
    EvaluationRequest,
    HistoricalTransaction,
    MerchantRecord,
    NearbyReport,
    Outcome,
    RiskSignal,
    RiskVerdict,
)
from sentinel.risk.reference import ReferenceData, default_reference_data
from sentinel.risk.scorer import RiskScorer

logger = logging.getLogger(__name__)


DEFAULT_TIMEZONE = "Asia/Kolkata"


class RiskPipeline:
    """
    Canonical risk evaluation pipeline.

    Evaluator order (reasons keep this order):
    1. Identifier pattern
    2. Merchant familiarity
    3. Amount anomaly
    4. Timing pattern
    5. Historical-risk carryover
    6. Merchant reputation, nearby reports, merchant phone
    """

    def __init__(
        self,
        reference: Optional[ReferenceData] = None,
        scorer: Optional[RiskScorer] = None,
        timezone: Union[str, tzinfo] = DEFAULT_TIMEZONE,
    ):
        """
        Initialize the pipeline.

        Args:
            reference: Screening lists (defaults to the built-in lists)
            scorer: Aggregator (defaults to RiskScorer())
            timezone: Timezone for hour-of-day checks
        """
        self.reference = reference or default_reference_data()
        self.scorer = scorer or RiskScorer()
        self.tz = ZoneInfo(timezone) if isinstance(timezone, str) else timezone

    def evaluate(self, request: EvaluationRequest) -> RiskVerdict:
        """
        Evaluate a payment.

        Args:
            request: Payee identifier plus amount, time and context

        Returns:
            Risk verdict

        Raises:
            InvalidArgumentError: If the request violates a precondition
        """
        _validate_request(request, self.tz)

        if self.reference.is_trusted(request.identifier):
            logger.debug(f"Trusted merchant: {request.identifier}")
            return self.scorer.trusted_verdict()

        verdict = self.scorer.aggregate(self.collect_signals(request))
        logger.debug(
            f"Evaluated {request.identifier}: score={verdict.score} "
            f"level={verdict.level.value} reasons={len(verdict.reasons)}"
        )
        return verdict

    def evaluate_identifier(self, identifier: str) -> RiskVerdict:
        """Evaluate an identifier on its own, without history or context."""
        _validate_identifier(identifier)

        if self.reference.is_trusted(identifier):
            return self.scorer.trusted_verdict()

        return self.scorer.aggregate([evaluate_pattern(identifier, self.reference)])

    def collect_signals(self, request: EvaluationRequest) -> list[RiskSignal]:
        """Run every evaluator and return their signals in order."""
        history = request.prior_transactions
        identifier = request.identifier

        return [
            evaluate_pattern(identifier, self.reference),
            evaluate_familiarity(identifier, history),
            evaluate_amount(identifier, request.amount, history),
            evaluate_timing(request.timestamp_ms, history, self.tz),
            evaluate_carryover(identifier, history),
            evaluate_merchant_reputation(request.merchant),
            evaluate_nearby_reports(request.nearby_reports),
            evaluate_phone(request.merchant_phone),
        ]


def _validate_identifier(identifier) -> None:
    if identifier is None:
        raise InvalidArgumentError("identifier is required")
    if not isinstance(identifier, str):
        raise InvalidArgumentError(
            f"identifier must be a string, got {type(identifier).__name__}"
        )


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_transaction(index: int, transaction) -> None:
    if not isinstance(transaction, HistoricalTransaction):
        raise InvalidArgumentError(
            f"prior_transactions[{index}] must be a HistoricalTransaction"
        )
    if not isinstance(transaction.identifier, str) or not transaction.identifier.strip():
        raise InvalidArgumentError(f"prior_transactions[{index}] is missing identifier")
    if not isinstance(transaction.timestamp_ms, int) or isinstance(
        transaction.timestamp_ms, bool
    ):
        raise InvalidArgumentError(f"prior_transactions[{index}] is missing timestamp")
    if transaction.amount is not None and not (
        _is_number(transaction.amount) and math.isfinite(transaction.amount)
    ):
        raise InvalidArgumentError(f"prior_transactions[{index}] has an invalid amount")
    if not _is_known_outcome(transaction.outcome):
        raise InvalidArgumentError(f"prior_transactions[{index}] has an unknown outcome")


def _is_known_outcome(value) -> bool:
    # Plain "safe"/"warning"/"risky" strings compare equal to the enum members
    try:
        Outcome(value)
    except (ValueError, TypeError):
        return False
    return True


def _validate_timestamp(timestamp_ms, tz: tzinfo) -> None:
    if not isinstance(timestamp_ms, int) or isinstance(timestamp_ms, bool):
        raise InvalidArgumentError("timestamp_ms must be epoch milliseconds")
    try:
        datetime.fromtimestamp(timestamp_ms / 1000, tz=tz)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidArgumentError(
            f"timestamp_ms {timestamp_ms} is outside the supported date range"
        ) from e


def _validate_context(request: EvaluationRequest) -> None:
    if request.merchant is not None and not isinstance(request.merchant, MerchantRecord):
        raise InvalidArgumentError("merchant must be a MerchantRecord")

    if request.nearby_reports is None:
        raise InvalidArgumentError("nearby_reports must be a list")
    for index, report in enumerate(request.nearby_reports):
        if not isinstance(report, NearbyReport):
            raise InvalidArgumentError(f"nearby_reports[{index}] must be a NearbyReport")

    if request.merchant_phone is not None and not isinstance(request.merchant_phone, str):
        raise InvalidArgumentError("merchant_phone must be a string")


def _validate_request(request: EvaluationRequest, tz: tzinfo) -> None:
    if request is None:
        raise InvalidArgumentError("request is required")

    _validate_identifier(request.identifier)

    if request.amount is not None and not (
        _is_number(request.amount) and math.isfinite(request.amount)
    ):
        raise InvalidArgumentError("amount must be a finite number")

    if request.timestamp_ms is not None:
        _validate_timestamp(request.timestamp_ms, tz)

    if request.prior_transactions is None:
        raise InvalidArgumentError("prior_transactions must be a list")

    for index, transaction in enumerate(request.prior_transactions):
        _validate_transaction(index, transaction)

    _validate_context(request)


def evaluate(
    request: EvaluationRequest,
    reference: Optional[ReferenceData] = None,
) -> RiskVerdict:
    """Evaluate a payment with a default pipeline."""
    return RiskPipeline(reference=reference).evaluate(request)
