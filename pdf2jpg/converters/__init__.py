"""
Conversion strategies for turning stored PDFs into image artifacts.

Available strategies:
- simulated (default placeholder; delay plus file name substitution)
"""

from pdf2jpg.converters.base import BaseConverter
from pdf2jpg.converters.simulated import SimulatedConverter

CONVERTERS = {
    "simulated": SimulatedConverter,
}


def get_converter(name: str, **options) -> BaseConverter:
    """Instantiate a converter by its registered name."""
    try:
        converter_cls = CONVERTERS[name]
    except KeyError:
        raise ValueError(f"Unknown converter: {name}") from None
    return converter_cls(**options)


__all__ = ["BaseConverter", "SimulatedConverter", "CONVERTERS", "get_converter"]
