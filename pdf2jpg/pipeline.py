"""
Conversion pipeline for pdf2jpg.

Runs a converter against a stored PDF within a bounded time budget and
builds the locator clients use to fetch the artifact.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional

from pdf2jpg.converters import BaseConverter, SimulatedConverter
from pdf2jpg.models import ConversionResult

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """Raised when a converter fails to produce an artifact."""


class ConversionTimeoutError(ConversionError):
    """Raised when a converter exceeds the pipeline's time budget."""


class ConversionPipeline:
    """
    Drives one conversion strategy.

    Pipeline stages:
    1. Check the stored source exists
    2. Run the converter, bounded by ``timeout`` seconds
    3. Build the artifact locator under ``url_prefix``
    """

    def __init__(
        self,
        converter: Optional[BaseConverter] = None,
        timeout: float = 30.0,
        url_prefix: str = "/api/files",
    ):
        """
        Initialize pipeline.

        Args:
            converter: Strategy to run (default: SimulatedConverter)
            timeout: Seconds the converter may take before the run fails
            url_prefix: Path prefix of the artifact locator
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {timeout}")

        self.converter = converter or SimulatedConverter()
        self.timeout = timeout
        self.url_prefix = url_prefix.rstrip("/")

    def artifact_url(self, artifact_name: str) -> str:
        return f"{self.url_prefix}/{artifact_name}"

    async def run(self, source: Path) -> ConversionResult:
        """
        Convert a stored PDF.

        Args:
            source: Path to the stored PDF

        Returns:
            ConversionResult with the artifact name and locator

        Raises:
            FileNotFoundError: source does not exist
            ConversionTimeoutError: converter ran past the timeout
            ConversionError: converter failed or returned no artifact
        """
        source = Path(source)

        if not source.exists():
            raise FileNotFoundError(f"PDF not found: {source}")

        logger.info(f"[Pipeline] Converting {source.name} with {self.converter.name}")
        started = time.monotonic()

        try:
            artifact_name = await asyncio.wait_for(
                self.converter.convert(source), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            raise ConversionTimeoutError(
                f"Conversion of {source.name} exceeded {self.timeout:.1f}s"
            ) from None
        except ConversionError:
            raise
        except Exception as e:
            raise ConversionError(f"Conversion of {source.name} failed: {e}") from e

        if not artifact_name:
            raise ConversionError(f"Converter {self.converter.name} returned no artifact")

        elapsed = time.monotonic() - started
        logger.info(f"[Pipeline] Produced {artifact_name} in {elapsed:.2f}s")

        return ConversionResult(
            source=source,
            artifact_name=artifact_name,
            artifact_url=self.artifact_url(artifact_name),
            elapsed=elapsed,
        )
