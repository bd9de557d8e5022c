"""
pdf2jpg: Turn uploaded PDF files into JPG artifacts.

The conversion step is a pluggable strategy so a real rasterizer can replace
the simulated default without changing how callers drive the pipeline.
"""

__version__ = "0.1.0"
__author__ = "pdf2jpg Team"

from pdf2jpg.models import ConversionResult
from pdf2jpg.pipeline import ConversionPipeline, ConversionError, ConversionTimeoutError

__all__ = [
    "ConversionResult",
    "ConversionPipeline",
    "ConversionError",
    "ConversionTimeoutError",
]
