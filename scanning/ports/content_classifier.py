"""
Content classifier port (interface).

Implementations call an external model and must not raise for
transport or parsing failures: they return
ClassificationVerdict.safe_default() instead.
"""
from abc import ABC, abstractmethod

from scanning.domain.verdict import ClassificationVerdict


class ContentClassifier(ABC):
    """Abstract classifier deciding whether file content looks malicious."""

    @abstractmethod
    def classify(self, file_name: str, file_content: str) -> ClassificationVerdict:
        """
        Classify file content.

        Args:
            file_name: Name of the file, passed to the model as context
            file_content: File content as text

        Returns:
            ClassificationVerdict
        """
        pass
