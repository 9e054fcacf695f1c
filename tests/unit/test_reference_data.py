"""
Unit tests for reference data.

Tests:
- Severity ordering
- Built-in lists
- Immutability
- JSON loading and error reporting
"""

import json
from dataclasses import FrozenInstanceError
from datetime import datetime

import pytest

from sentinel.risk import (
    ReferenceData,
    ReferenceDataError,
    ReferenceEntry,
    Severity,
    default_reference_data,
    load_reference_data,
)
from sentinel.risk.reference import parse_reference_data


class TestSeverity:
    """Tests for severity ordering."""

    def test_ordering(self):
        assert Severity.LOW < Severity.MEDIUM < Severity.HIGH < Severity.CRITICAL
        assert Severity.CRITICAL >= Severity.HIGH
        assert max([Severity.MEDIUM, Severity.CRITICAL, Severity.LOW]) == Severity.CRITICAL

    def test_values(self):
        assert Severity("high") == Severity.HIGH


class TestDefaultReferenceData:
    """Tests for the built-in lists."""

    def test_contents(self):
        reference = default_reference_data()

        assert len(reference.blacklist) == 5
        assert len(reference.trusted) == 10
        assert "otp" in reference.keywords
        assert len(reference.patterns) == 9

    def test_cached(self):
        assert default_reference_data() is default_reference_data()

    def test_lookup(self):
        entry = default_reference_data().lookup(" Winner@UPI ")
        assert entry.fraud_type == "lottery_scam"
        assert entry.severity == Severity.HIGH

    def test_trusted_is_exact_match(self):
        reference = default_reference_data()
        assert reference.is_trusted("Paytm@Paytm")
        assert not reference.is_trusted("paytm@paytm.fake")

    def test_fraud_type_descriptions(self):
        reference = default_reference_data()
        assert reference.describe_fraud_type("phishing") == "Phishing attempt to steal credentials"
        assert reference.describe_fraud_type("unheard_of") is None
        assert reference.describe_fraud_type(None) is None

    def test_immutable(self):
        reference = default_reference_data()

        with pytest.raises(FrozenInstanceError):
            reference.keywords = ()
        with pytest.raises(TypeError):
            reference.blacklist["new@ybl"] = reference.lookup("winner@upi")


class TestReferenceData:
    """Tests for building reference data."""

    def test_keywords_lowercased_and_deduplicated(self):
        reference = ReferenceData.build(keywords=["Refund", "refund", "OTP", ""])
        assert reference.keywords == ("refund", "otp")

    def test_invalid_pattern(self):
        with pytest.raises(ReferenceDataError, match="Invalid risk pattern"):
            ReferenceData.build(patterns=["(unclosed"])

    def test_negative_report_count(self):
        with pytest.raises(ReferenceDataError):
            ReferenceEntry(
                identifier="x@ybl",
                reason="r",
                severity=Severity.LOW,
                report_count=-1,
                last_reported_at=datetime(2025, 1, 1),
                fraud_type="phishing",
            )


class TestLoadReferenceData:
    """Tests for JSON loading."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "reference.json"
        path.write_text(
            json.dumps(
                {
                    "blacklist": [
                        {
                            "identifier": "KYC.Update@ybl",
                            "reason": "Fake KYC update request",
                            "severity": "critical",
                            "report_count": 41,
                            "last_reported_at": "2025-01-10T09:30:00",
                            "fraud_type": "phishing",
                        }
                    ],
                    "trusted": ["dmart@icici"],
                    "fraud_types": {"kyc_scam": "Fake KYC verification"},
                }
            ),
            encoding="utf-8",
        )

        reference = load_reference_data(path)

        entry = reference.lookup("kyc.update@ybl")
        assert entry.report_count == 41
        assert entry.severity == Severity.CRITICAL
        assert reference.trusted == frozenset({"dmart@icici"})
        # Missing sections fall back to the built-in lists
        assert len(reference.keywords) == len(default_reference_data().keywords)
        assert len(reference.patterns) == 9
        assert reference.describe_fraud_type("kyc_scam") == "Fake KYC verification"
        assert reference.describe_fraud_type("phishing") is not None

    def test_empty_sections_replace_defaults(self):
        reference = parse_reference_data({"blacklist": [], "keywords": []})
        assert len(reference.blacklist) == 0
        assert reference.keywords == ()
        assert len(reference.trusted) == 10

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReferenceDataError, match="Cannot read"):
            load_reference_data(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ReferenceDataError):
            load_reference_data(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(ReferenceDataError, match="JSON object"):
            load_reference_data(path)

    def test_schema_violation(self):
        with pytest.raises(ReferenceDataError, match="Invalid reference data"):
            parse_reference_data(
                {"blacklist": [{"identifier": "x@ybl", "severity": "extreme"}]}
            )
