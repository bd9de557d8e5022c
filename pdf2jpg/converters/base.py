"""
Base converter interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class BaseConverter(ABC):
    """Abstract base class for all conversion strategies."""

    def __init__(self):
        self.name = self.__class__.__name__.replace("Converter", "").lower()

    @abstractmethod
    async def convert(self, source: Path) -> str:
        """
        Convert a stored PDF into an image artifact.

        Args:
            source: Path to the stored PDF file

        Returns:
            File name of the produced artifact
        """
        pass
