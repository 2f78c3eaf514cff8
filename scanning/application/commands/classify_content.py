"""
ClassifyContentCommand.

Command to classify an uploaded file's content.
"""
from dataclasses import dataclass


@dataclass
class ClassifyContentCommand:
    """Command to classify file content."""

    file_name: str
    file_content: str
