"""
Command-line interface for pdf2jpg.
"""

import sys
import asyncio
import argparse
import logging
import os
from pathlib import Path
from typing import Optional, List

from dotenv import load_dotenv

from pdf2jpg import __version__
from pdf2jpg.converters import CONVERTERS, get_converter
from pdf2jpg.pipeline import ConversionPipeline, ConversionError


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    load_dotenv()  # Load .env file if present

    parser = argparse.ArgumentParser(
        description="pdf2jpg: Convert a PDF file into a JPG artifact",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert with the default strategy
  pdf2jpg input.pdf

  # Skip the simulated delay
  pdf2jpg input.pdf --delay 0

  # Print locators under a custom prefix
  pdf2jpg input.pdf --url-prefix https://cdn.example.com/files

Environment Variables:
  CONVERTER            Conversion strategy (default: simulated)
  CONVERSION_DELAY     Simulated delay in seconds
  CONVERSION_TIMEOUT   Time budget in seconds
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="Input PDF file",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"pdf2jpg {__version__}",
    )

    parser.add_argument(
        "--converter",
        choices=sorted(CONVERTERS),
        default=os.getenv("CONVERTER", "simulated"),
        help="Conversion strategy (default: simulated)",
    )

    parser.add_argument(
        "--delay",
        type=float,
        default=float(os.getenv("CONVERSION_DELAY", "2.0")),
        help="Simulated conversion delay in seconds (default: 2.0)",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=float(os.getenv("CONVERSION_TIMEOUT", "30.0")),
        help="Conversion time budget in seconds (default: 30.0)",
    )

    parser.add_argument(
        "--url-prefix",
        default=os.getenv("ARTIFACT_URL_PREFIX", "/api/files"),
        help="Prefix of the printed artifact locator",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Validate input
    if not args.input:
        parser.print_help()
        return 1

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    if args.input.suffix.lower() != ".pdf":
        print(f"Error: Not a PDF file: {args.input}", file=sys.stderr)
        return 1

    try:
        pipeline = ConversionPipeline(
            converter=get_converter(args.converter, delay=args.delay),
            timeout=args.timeout,
            url_prefix=args.url_prefix,
        )
        result = asyncio.run(pipeline.run(args.input))

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return 130

    except (ConversionError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    print(result.artifact_url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
