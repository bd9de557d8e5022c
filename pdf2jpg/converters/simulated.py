"""
Placeholder converter that stands in for a real rasterizer.
"""

import asyncio
from pathlib import Path

from pdf2jpg.converters.base import BaseConverter


class SimulatedConverter(BaseConverter):
    """
    Waits a fixed delay, then names the artifact after the source.

    No image is rendered. The artifact name is the source name with its
    first ".pdf" swapped for ".jpg".
    """

    def __init__(self, delay: float = 2.0):
        super().__init__()
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.delay = delay

    async def convert(self, source: Path) -> str:
        if self.delay:
            await asyncio.sleep(self.delay)
        return Path(source).name.replace(".pdf", ".jpg", 1)
