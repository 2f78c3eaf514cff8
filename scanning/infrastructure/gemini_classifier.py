"""
Gemini implementation of ContentClassifier.

Calls the Generative Language REST API (generateContent) and asks for a
single JSON object. Any failure yields the safe default verdict.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from scanning.domain.verdict import ClassificationVerdict
from scanning.ports.content_classifier import ContentClassifier

logger = logging.getLogger(__name__)

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 30

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)

PROMPT_TEMPLATE = """Respond ONLY with a minified JSON object. No backticks.
{{
  "is_malicious": boolean,
  "confidence_score": number (0..1),
  "reason": string,
  "threat_type": string
}}
Analyze the following file content for malicious behavior as a senior cybersecurity analyst.
The file is named "{file_name}".
Content:
---
{file_content}
---"""


class GeminiContentClassifier(ContentClassifier):
    """
    Gemini REST adapter.

    Without an API key no request is made and every call returns the
    safe default.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_prompt(self, file_name: str, file_content: str) -> str:
        return PROMPT_TEMPLATE.format(file_name=file_name, file_content=file_content)

    def classify(self, file_name: str, file_content: str) -> ClassificationVerdict:
        if not self.api_key:
            return ClassificationVerdict.safe_default("AI disabled or not configured")

        body = {
            "contents": [{"parts": [{"text": self.build_prompt(file_name, file_content)}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        try:
            response = self.session.post(
                GEMINI_API_URL.format(model=self.model),
                json=body,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning("Content classification request failed: %s", e)
            return ClassificationVerdict.safe_default("AI service unavailable")

        try:
            reply = response.json()
        except ValueError:
            logger.warning("Content classification returned a non-JSON body")
            return ClassificationVerdict.safe_default("Non-JSON response from AI")

        text = self._reply_text(reply)
        if text is None:
            logger.warning("Content classification reply had no text (blocked or empty)")
            return ClassificationVerdict.safe_default("Empty or blocked response from AI")

        return self.parse_verdict(text)

    @staticmethod
    def _reply_text(reply: Dict[str, Any]) -> Optional[str]:
        try:
            parts = reply["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            return None
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        return text or None

    @staticmethod
    def parse_verdict(text: str) -> ClassificationVerdict:
        """
        Parse the model's text into a verdict.

        Args:
            text: Model output, possibly wrapped in code fences

        Returns:
            Normalised verdict, or the safe default for non-JSON output
        """
        cleaned = _CODE_FENCE.sub("", text).strip()
        try:
            parsed = json.loads(cleaned)
        except ValueError:
            logger.warning("Content classifier returned non-JSON text, falling back")
            return ClassificationVerdict.safe_default("Non-JSON response from AI")
        if not isinstance(parsed, dict):
            return ClassificationVerdict.safe_default("Non-JSON response from AI")
        return ClassificationVerdict.from_reply(parsed)


def get_content_classifier() -> ContentClassifier:
    """Build the classifier from settings."""
    return GeminiContentClassifier(
        api_key=getattr(settings, "GEMINI_API_KEY", None),
        model=getattr(settings, "GEMINI_MODEL", DEFAULT_MODEL),
        timeout=getattr(settings, "CONTENT_SCAN_TIMEOUT", DEFAULT_TIMEOUT),
    )
