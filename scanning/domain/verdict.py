"""
Content classification verdict.

A verdict is advisory: callers treat a safe default as "no opinion",
never as proof that content is benign.
"""
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping

UNKNOWN_THREAT = "Unknown"
BENIGN_THREAT = "Benign"


def _clamp_confidence(value: Any) -> float:
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if score != score:  # NaN
        return 0.0
    return max(0.0, min(1.0, score))


@dataclass(frozen=True)
class ClassificationVerdict:
    """Result of classifying one file."""

    is_malicious: bool
    confidence_score: float
    reason: str
    threat_type: str

    def __post_init__(self):
        if not 0.0 <= self.confidence_score <= 1.0:
            raise ValueError("Confidence score must be between 0 and 1")

    @classmethod
    def safe_default(cls, reason: str) -> "ClassificationVerdict":
        """Verdict returned when no classifier answer is available."""
        return cls(
            is_malicious=False,
            confidence_score=0.0,
            reason=reason,
            threat_type=BENIGN_THREAT,
        )

    @classmethod
    def from_reply(cls, reply: Mapping[str, Any]) -> "ClassificationVerdict":
        """
        Normalise a loosely typed classifier reply.

        Args:
            reply: Parsed JSON object from the classifier

        Returns:
            ClassificationVerdict with coerced fields
        """
        return cls(
            is_malicious=bool(reply.get("is_malicious")),
            confidence_score=_clamp_confidence(reply.get("confidence_score")),
            reason=str(reply.get("reason") or ""),
            threat_type=str(reply.get("threat_type") or UNKNOWN_THREAT),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
