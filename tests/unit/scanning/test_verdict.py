"""
Unit tests for ClassificationVerdict.
"""
import pytest

from scanning.domain.verdict import ClassificationVerdict


class TestClassificationVerdict:
    """Tests for ClassificationVerdict."""

    def test_safe_default(self):
        verdict = ClassificationVerdict.safe_default("AI disabled or not configured")

        assert verdict.is_malicious is False
        assert verdict.confidence_score == 0.0
        assert verdict.threat_type == "Benign"
        assert verdict.reason == "AI disabled or not configured"

    def test_from_reply(self):
        verdict = ClassificationVerdict.from_reply(
            {
                "is_malicious": True,
                "confidence_score": 0.93,
                "reason": "Downloads and executes a remote payload",
                "threat_type": "Trojan",
            }
        )

        assert verdict.is_malicious is True
        assert verdict.confidence_score == pytest.approx(0.93)
        assert verdict.threat_type == "Trojan"

    @pytest.mark.parametrize(
        "raw, expected",
        [(1.7, 1.0), (-0.2, 0.0), ("0.5", 0.5), ("high", 0.0), (None, 0.0), (float("nan"), 0.0)],
    )
    def test_confidence_is_clamped(self, raw, expected):
        verdict = ClassificationVerdict.from_reply({"confidence_score": raw})
        assert verdict.confidence_score == expected

    def test_missing_fields_get_defaults(self):
        verdict = ClassificationVerdict.from_reply({})

        assert verdict.is_malicious is False
        assert verdict.reason == ""
        assert verdict.threat_type == "Unknown"

    def test_out_of_range_rejected_on_construction(self):
        with pytest.raises(ValueError):
            ClassificationVerdict(
                is_malicious=False, confidence_score=2.0, reason="", threat_type="Benign"
            )

    def test_to_dict(self):
        assert ClassificationVerdict.safe_default("x").to_dict() == {
            "is_malicious": False,
            "confidence_score": 0.0,
            "reason": "x",
            "threat_type": "Benign",
        }
