"""
ClassifyContentHandler.

Handles the classify content command.
"""
import logging

from asgiref.sync import sync_to_async

from core.domain.exceptions import InputInvalidError
from core.metrics import content_scans_total
from scanning.application.commands.classify_content import ClassifyContentCommand
from scanning.domain.verdict import ClassificationVerdict
from scanning.ports.content_classifier import ContentClassifier

logger = logging.getLogger(__name__)


class ClassifyContentHandler:
    """Handler for ClassifyContentCommand."""

    def __init__(self, classifier: ContentClassifier):
        """Initialize handler with a classifier."""
        self.classifier = classifier

    async def handle(self, command: ClassifyContentCommand) -> ClassificationVerdict:
        """
        Handle classify content command.

        Args:
            command: ClassifyContentCommand

        Returns:
            ClassificationVerdict

        Raises:
            InputInvalidError: If file name or content is missing
        """
        if not command.file_name or not command.file_content:
            raise InputInvalidError("File content and name are required.")

        verdict = await sync_to_async(self.classifier.classify)(
            command.file_name, command.file_content
        )

        label = "malicious" if verdict.is_malicious else "benign"
        content_scans_total.labels(verdict=label).inc()
        logger.info(
            "Classified %s: %s (%.2f, %s)",
            command.file_name,
            label,
            verdict.confidence_score,
            verdict.threat_type,
        )
        return verdict
