"""
Identifier pattern evaluation.

Scores a payee identifier on its own, without any history:
- Blacklist exact match
- Suspicious keyword scan
- Risky regex patterns
- Structural format checks
- Heuristics on the local part (before the @)

Every check runs; penalties accumulate and are capped by the scorer.
Trusted-merchant short-circuiting is the pipeline's job.
"""

import logging
import re
from typing import Optional

from sentinel.risk.models import RiskSignal
from sentinel.risk.reference import (
    ReferenceData,
    default_reference_data,
    normalize_identifier,
)

logger = logging.getLogger(__name__)


BLACKLIST_PENALTY = 80
KEYWORD_PENALTY = 15
PATTERN_PENALTY = 12
FORMAT_PENALTY = 8

MIN_LENGTH = 5
MAX_LENGTH = 50

SUSPICIOUS_FRAUD_TYPE = "suspicious_pattern"

# Characters never seen in a legitimate VPA
UNSAFE_CHARACTERS = re.compile(r"[<>{}\[\]\\|`~\s]")

SCAM_PREFIXES = ("pay", "send", "transfer", "collect", "receive")
URGENCY_WORDS = re.compile(r"now|asap|quick|fast|instant", re.IGNORECASE)
SHORT_PREFIX_DIGITS = re.compile(r"[a-z]{1,3}[0-9]{5,}", re.IGNORECASE)
ALL_DIGITS = re.compile(r"[0-9]+")
DIGIT = re.compile(r"[0-9]")


def evaluate_pattern(
    identifier: str,
    reference: Optional[ReferenceData] = None,
) -> RiskSignal:
    """
    Score an identifier string in isolation.

    Args:
        identifier: Payee identifier (local-part@handle)
        reference: Screening lists (defaults to the built-in lists)

    Returns:
        Signal with the summed, uncapped penalty and reasons in check order
    """
    reference = reference or default_reference_data()
    normalized = normalize_identifier(identifier)
    signal = RiskSignal(source="identifier")

    _check_blacklist(normalized, reference, signal)
    _check_keywords(normalized, reference, signal)
    _check_patterns(normalized, reference, signal)

    for issue in validate_format(normalized):
        signal.add(FORMAT_PENALTY, issue)

    for points, reason in heuristic_findings(normalized):
        signal.add(points, reason)

    return signal


def _check_blacklist(
    normalized: str,
    reference: ReferenceData,
    signal: RiskSignal,
) -> None:
    entry = reference.lookup(normalized)
    if entry is None:
        return

    signal.delta += BLACKLIST_PENALTY
    signal.reasons.append(f"Blacklisted: {entry.reason}")
    signal.reasons.append(f"Reported {entry.report_count} times")
    signal.fraud_type = entry.fraud_type
    logger.debug(f"Blacklist hit for {normalized} ({entry.severity.value})")


def _check_keywords(
    normalized: str,
    reference: ReferenceData,
    signal: RiskSignal,
) -> None:
    found = [kw for kw in reference.keywords if kw in normalized]
    if not found:
        return

    signal.add(
        len(found) * KEYWORD_PENALTY,
        f"Suspicious keywords detected: {', '.join(found)}",
    )
    if signal.fraud_type is None:
        signal.fraud_type = SUSPICIOUS_FRAUD_TYPE


def _check_patterns(
    normalized: str,
    reference: ReferenceData,
    signal: RiskSignal,
) -> None:
    matched = sum(1 for pattern in reference.patterns if pattern.search(normalized))
    if not matched:
        return

    # Count only; individual rule names stay internal
    signal.add(matched * PATTERN_PENALTY, f"Matches {matched} fraud pattern(s)")
    if signal.fraud_type is None:
        signal.fraud_type = SUSPICIOUS_FRAUD_TYPE


def validate_format(identifier: str) -> list[str]:
    """
    Check the structure of an identifier.

    Returns:
        One message per violation, empty when well-formed
    """
    issues = []

    separators = identifier.count("@")
    if separators == 0:
        issues.append("Invalid UPI format - missing @ symbol")
    elif separators > 1:
        issues.append("Invalid format - multiple @ symbols")

    if UNSAFE_CHARACTERS.search(identifier):
        issues.append("Contains suspicious special characters")

    if len(identifier) > MAX_LENGTH:
        issues.append("Unusually long UPI ID")

    if len(identifier) < MIN_LENGTH:
        issues.append("Suspiciously short UPI ID")

    return issues


def heuristic_findings(identifier: str) -> list[tuple[int, str]]:
    """
    Run heuristics on the local part of an identifier.

    Returns:
        (points, reason) for each triggered heuristic
    """
    findings = []
    username = identifier.split("@")[0]

    if ALL_DIGITS.fullmatch(username):
        findings.append((10, "Username is only numbers"))

    digit_count = len(DIGIT.findall(username))
    if digit_count > len(username) * 0.7:
        findings.append((8, "Excessive numbers in username"))

    if SHORT_PREFIX_DIGITS.fullmatch(username):
        findings.append((12, "Random pattern detected (e.g., abc12345)"))

    if username.startswith(SCAM_PREFIXES):
        findings.append((10, "Suspicious prefix detected"))

    if URGENCY_WORDS.search(username):
        findings.append((8, "Urgency tactics detected"))

    return findings
