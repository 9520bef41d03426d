"""Exceptions raised while reading blog documents"""

from pathlib import Path


class FrontmatterError(ValueError):
    """The YAML header of a document could not be read as a mapping."""

    def __init__(self, path: Path | str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")
