"""
Risk evaluation API routes.

Provides endpoints for:
- POST /api/v1/risk/evaluate - Score a payee identifier with context
- POST /api/v1/risk/scan - Parse a UPI QR payload, then score its payee

Scan history and merchant context are supplied in the request body;
the endpoints do no lookups of their own.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from sentinel.api.deps import get_pipeline
from sentinel.config import settings
from sentinel.risk import (
    EvaluationRequest,
    HistoricalTransaction,
    InvalidArgumentError,
    MerchantRecord,
    NearbyReport,
    Outcome,
    RiskPipeline,
    RiskVerdict,
    Severity,
    describe,
)
from sentinel.upi import parse_upi_uri

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/risk", tags=["risk"])


# ========== Request/Response Models ==========


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PriorTransactionIn(_CamelModel):
    """A previous scan supplied by the caller."""

    identifier: str = Field(min_length=1)
    amount: Optional[float] = None
    timestamp: int = Field(description="Epoch milliseconds")
    outcome: Outcome = Outcome.SAFE


class MerchantIn(_CamelModel):
    """Stored reputation of the merchant."""

    safety_score: int = Field(ge=0, le=100, alias="safetyScore")
    verified_reports: int = Field(default=0, ge=0, alias="verifiedReports")
    total_reports: int = Field(default=0, ge=0, alias="totalReports")


class NearbyReportIn(_CamelModel):
    """A fraud report near the payment location."""

    severity: Severity
    verified: bool = True


class _ContextIn(_CamelModel):
    amount: Optional[float] = Field(default=None, ge=0)
    timestamp: Optional[int] = Field(default=None, description="Epoch milliseconds")
    prior_transactions: list[PriorTransactionIn] = Field(
        default_factory=list, alias="priorTransactions"
    )
    merchant: Optional[MerchantIn] = None
    nearby_reports: list[NearbyReportIn] = Field(
        default_factory=list, alias="nearbyReports"
    )
    merchant_phone: Optional[str] = Field(default=None, alias="merchantPhone")


class EvaluateRequest(_ContextIn):
    """Request to score a payee identifier."""

    identifier: str


class ScanRequest(_ContextIn):
    """Request to score the payee of a scanned UPI QR payload."""

    qr: str = Field(min_length=1, description="Raw upi://pay URI")


class VerdictResponse(_CamelModel):
    """Risk verdict."""

    score: int = Field(ge=0, le=100)
    level: str
    reasons: list[str]
    fraud_type: Optional[str] = Field(default=None, alias="fraudType")
    confidence: int = Field(ge=0, le=100)
    recommendation: str
    is_risky: bool = Field(alias="isRisky")
    description: str


class PaymentResponse(_CamelModel):
    """Parsed UPI payment URI."""

    vpa: str
    payee_name: str = Field(alias="payeeName")
    merchant_code: Optional[str] = Field(default=None, alias="merchantCode")
    transaction_ref: Optional[str] = Field(default=None, alias="transactionRef")


class ScanResponse(_CamelModel):
    """Parsed payment plus its verdict."""

    payment: PaymentResponse
    verdict: VerdictResponse


# ========== Helpers ==========


def _to_request(identifier: str, body: _ContextIn) -> EvaluationRequest:
    if len(body.prior_transactions) > settings.max_prior_transactions:
        raise InvalidArgumentError(
            f"At most {settings.max_prior_transactions} prior transactions are accepted"
        )

    return EvaluationRequest(
        identifier=identifier,
        amount=body.amount,
        timestamp_ms=body.timestamp,
        prior_transactions=[
            HistoricalTransaction(
                identifier=t.identifier,
                timestamp_ms=t.timestamp,
                amount=t.amount,
                outcome=t.outcome,
            )
            for t in body.prior_transactions
        ],
        merchant=(
            MerchantRecord(
                safety_score=body.merchant.safety_score,
                verified_reports=body.merchant.verified_reports,
                total_reports=body.merchant.total_reports,
            )
            if body.merchant
            else None
        ),
        nearby_reports=[
            NearbyReport(severity=r.severity, verified=r.verified)
            for r in body.nearby_reports
        ],
        merchant_phone=body.merchant_phone,
    )


def _to_response(verdict: RiskVerdict, pipeline: RiskPipeline) -> VerdictResponse:
    return VerdictResponse(
        score=verdict.score,
        level=verdict.level.value,
        reasons=verdict.reasons,
        fraud_type=verdict.fraud_type,
        confidence=verdict.confidence,
        recommendation=verdict.recommendation,
        is_risky=verdict.is_risky,
        description=describe(verdict, pipeline.reference),
    )


# ========== Endpoints ==========


@router.post("/evaluate", response_model=VerdictResponse)
async def evaluate_payee(
    body: EvaluateRequest,
    pipeline: RiskPipeline = Depends(get_pipeline),
):
    """
    Score a payee identifier.

    Invalid input is rejected with level "unknown" rather than scored.
    """
    verdict = pipeline.evaluate(_to_request(body.identifier, body))
    logger.info(
        f"Risk evaluation: level={verdict.level.value} score={verdict.score} "
        f"priors={len(body.prior_transactions)}"
    )
    return _to_response(verdict, pipeline)


@router.post("/scan", response_model=ScanResponse)
async def scan_payment(
    body: ScanRequest,
    pipeline: RiskPipeline = Depends(get_pipeline),
):
    """Parse a UPI QR payload and score its payee."""
    payment = parse_upi_uri(body.qr)
    if payment is None:
        raise InvalidArgumentError("qr is not a UPI payment URI with a payee address")

    verdict = pipeline.evaluate(_to_request(payment.vpa, body))
    logger.info(
        f"QR scan evaluation: level={verdict.level.value} score={verdict.score}"
    )

    return ScanResponse(
        payment=PaymentResponse(
            vpa=payment.vpa,
            payee_name=payment.payee_name,
            merchant_code=payment.merchant_code,
            transaction_ref=payment.transaction_ref,
        ),
        verdict=_to_response(verdict, pipeline),
    )
