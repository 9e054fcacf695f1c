"""
Reference data for identifier screening.

Holds the curated lists the identifier evaluator matches against:
1. Blacklist - known fraudulent identifiers with report metadata
2. Trusted merchants - verified identifiers that bypass scoring
3. Suspicious keywords - social engineering vocabulary
4. Risky patterns - regexes for burner and impersonation identifiers

Built-in defaults are embedded below. A deployment can replace any
section with a JSON file loaded once at startup.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from sentinel.risk.exceptions import ReferenceDataError

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Severity of a reported identifier, ordered low < medium < high < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self.value]

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANKS = {"low": 0, "medium": 1, "high": 2, "critical": 3}


def normalize_identifier(identifier: str) -> str:
    """Normalize an identifier for matching (trimmed, lower-case)."""
    return identifier.strip().lower()


@dataclass(frozen=True)
class ReferenceEntry:
    """A blacklisted identifier."""

    identifier: str
    reason: str
    severity: Severity
    report_count: int
    last_reported_at: datetime
    fraud_type: str
    verified: bool = True

    def __post_init__(self):
        if self.report_count < 0:
            raise ReferenceDataError(
                f"report_count must be non-negative for {self.identifier}"
            )


# ============================================================================
# BLACKLIST
# ============================================================================

DEFAULT_BLACKLIST = [
    ReferenceEntry(
        identifier="test@paytm",
        reason="Test account - commonly used in scams",
        severity=Severity.HIGH,
        report_count=156,
        last_reported_at=datetime(2024, 12, 25),
        fraud_type="fake_account",
    ),
    ReferenceEntry(
        identifier="scammer@phonepe",
        reason="Known scammer account",
        severity=Severity.CRITICAL,
        report_count=89,
        last_reported_at=datetime(2024, 12, 28),
        fraud_type="confirmed_fraud",
    ),
    ReferenceEntry(
        identifier="fake123@paytm",
        reason="Fake merchant account",
        severity=Severity.CRITICAL,
        report_count=234,
        last_reported_at=datetime(2024, 12, 29),
        fraud_type="fake_merchant",
    ),
    ReferenceEntry(
        identifier="winner@upi",
        reason="Lottery scam pattern",
        severity=Severity.HIGH,
        report_count=67,
        last_reported_at=datetime(2024, 12, 20),
        fraud_type="lottery_scam",
    ),
    ReferenceEntry(
        identifier="refund@okaxis",
        reason="Fake refund scam",
        severity=Severity.HIGH,
        report_count=123,
        last_reported_at=datetime(2024, 12, 26),
        fraud_type="refund_scam",
    ),
]


# ============================================================================
# SUSPICIOUS KEYWORDS
# ============================================================================

DEFAULT_KEYWORDS = [
    # Scam indicators
    "scam", "scammer", "fake", "test", "fraud", "phishing",
    # Lottery/prize
    "winner", "prize", "lottery", "jackpot", "reward",
    # Refund
    "refund", "cashback", "return", "reversal",
    # Impersonation
    "official", "support", "helpdesk", "customer.care",
    # Urgency
    "urgent", "immediate", "expire", "limited",
    # Too good to be true
    "free", "bonus", "offer", "deal", "discount",
    # Technical
    "verify", "confirm", "update", "secure", "otp",
]


# ============================================================================
# RISKY PATTERNS
# ============================================================================

DEFAULT_PATTERNS = [
    r"test\d+",  # test123
    r"fake\w+",  # fakemerchant
    r"scam\w*",  # scam, scammer
    r"\d{10,}",  # long digit run
    r"([a-z])\1{4,}",  # aaaaa
    r"^[0-9]+@",  # digits-only local part
    r"\.{2,}",  # ..
    r"_+$",  # trailing underscores
    r"^(admin|root|system)@",
]


# ============================================================================
# TRUSTED MERCHANTS
# ============================================================================

DEFAULT_TRUSTED = [
    "amazon.pay@axisbank",
    "flipkart@axisbank",
    "paytm@paytm",
    "phonepe@yesbank",
    "googlepay@okicici",
    "bhim@upi",
    "swiggy@axisbank",
    "zomato@hdfcbank",
    "uber@axisbank",
    "ola@hdfcbank",
]


FRAUD_TYPES = {
    "fake_account": "Fake or test account used in fraudulent activities",
    "confirmed_fraud": "Confirmed fraudulent account with multiple reports",
    "fake_merchant": "Impersonating legitimate merchant",
    "lottery_scam": "Lottery or prize scam pattern detected",
    "refund_scam": "Fake refund or cashback scam",
    "phishing": "Phishing attempt to steal credentials",
    "impersonation": "Impersonating official support/service",
    "suspicious_pattern": "Matches known fraud patterns",
}


@dataclass(frozen=True)
class ReferenceData:
    """Immutable bundle of screening lists."""

    blacklist: Mapping[str, ReferenceEntry] = field(
        default_factory=lambda: MappingProxyType({})
    )
    trusted: frozenset[str] = frozenset()
    keywords: tuple[str, ...] = ()
    patterns: tuple[re.Pattern, ...] = ()
    fraud_types: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(FRAUD_TYPES))
    )

    @classmethod
    def build(
        cls,
        blacklist: Iterable[ReferenceEntry] = (),
        trusted: Iterable[str] = (),
        keywords: Iterable[str] = (),
        patterns: Iterable[str] = (),
        fraud_types: Optional[Mapping[str, str]] = None,
    ) -> "ReferenceData":
        """
        Build reference data, normalizing identifiers and compiling patterns.

        Raises:
            ReferenceDataError: If a pattern is not a valid regex
        """
        entries = {normalize_identifier(e.identifier): e for e in blacklist}

        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern, re.IGNORECASE))
            except re.error as e:
                raise ReferenceDataError(f"Invalid risk pattern {pattern!r}: {e}") from e

        # Keep first occurrence order, drop repeats
        unique_keywords = tuple(dict.fromkeys(k.lower() for k in keywords if k))

        return cls(
            blacklist=MappingProxyType(entries),
            trusted=frozenset(normalize_identifier(t) for t in trusted),
            keywords=unique_keywords,
            patterns=tuple(compiled),
            fraud_types=MappingProxyType(dict(fraud_types or FRAUD_TYPES)),
        )

    def lookup(self, identifier: str) -> Optional[ReferenceEntry]:
        """Get the blacklist entry for an identifier, if any."""
        return self.blacklist.get(normalize_identifier(identifier))

    def is_trusted(self, identifier: str) -> bool:
        """Check trusted-merchant membership (case-insensitive exact match)."""
        return normalize_identifier(identifier) in self.trusted

    def describe_fraud_type(self, fraud_type: Optional[str]) -> Optional[str]:
        if not fraud_type:
            return None
        return self.fraud_types.get(fraud_type)


@lru_cache()
def default_reference_data() -> ReferenceData:
    """Built-in reference data (cached, shared read-only)."""
    return ReferenceData.build(
        blacklist=DEFAULT_BLACKLIST,
        trusted=DEFAULT_TRUSTED,
        keywords=DEFAULT_KEYWORDS,
        patterns=DEFAULT_PATTERNS,
        fraud_types=FRAUD_TYPES,
    )


# ========== File loading ==========


class _EntryFile(BaseModel):
    identifier: str = Field(min_length=1)
    reason: str
    severity: Severity
    report_count: int = Field(default=0, ge=0)
    last_reported_at: datetime
    fraud_type: str
    verified: bool = True


class _ReferenceFile(BaseModel):
    blacklist: Optional[list[_EntryFile]] = None
    trusted: Optional[list[str]] = None
    keywords: Optional[list[str]] = None
    patterns: Optional[list[str]] = None
    fraud_types: Optional[dict[str, str]] = None


def parse_reference_data(data: dict[str, Any]) -> ReferenceData:
    """
    Build reference data from a decoded JSON document.

    Sections missing from the document fall back to the built-in lists.

    Raises:
        ReferenceDataError: If the document does not match the schema
    """
    try:
        parsed = _ReferenceFile.model_validate(data)
    except ValidationError as e:
        raise ReferenceDataError(f"Invalid reference data: {e}") from e

    if parsed.blacklist is None:
        blacklist = DEFAULT_BLACKLIST
    else:
        blacklist = [ReferenceEntry(**entry.model_dump()) for entry in parsed.blacklist]

    return ReferenceData.build(
        blacklist=blacklist,
        trusted=DEFAULT_TRUSTED if parsed.trusted is None else parsed.trusted,
        keywords=DEFAULT_KEYWORDS if parsed.keywords is None else parsed.keywords,
        patterns=DEFAULT_PATTERNS if parsed.patterns is None else parsed.patterns,
        fraud_types={**FRAUD_TYPES, **(parsed.fraud_types or {})},
    )


def load_reference_data(path: Path) -> ReferenceData:
    """
    Load reference data from a JSON file.

    Args:
        path: Path to the JSON document

    Returns:
        Reference data ready for evaluation

    Raises:
        ReferenceDataError: If the file is unreadable or invalid
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ReferenceDataError(f"Cannot read reference data from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ReferenceDataError(f"Reference data in {path} must be a JSON object")

    reference = parse_reference_data(data)
    logger.info(
        f"Loaded reference data from {path}: "
        f"{len(reference.blacklist)} blacklisted, {len(reference.trusted)} trusted, "
        f"{len(reference.keywords)} keywords, {len(reference.patterns)} patterns"
    )
    return reference
