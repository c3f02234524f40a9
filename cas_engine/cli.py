"""
Command line entry point.

Usage:
    cas-extract statement.pdf --password ABCDE1234F
    cas-extract statement.txt --text --output result.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from cas_engine.core.logging_config import configure_logging
from cas_engine.services.extraction import (
    ERROR_MESSAGES,
    ExtractionDiagnostics,
    StatementExtractionError,
    cas_extractor,
)
from cas_engine.services.pdf import text_extractor

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cas-extract",
        description="Extract holdings from a CDSL Consolidated Account Statement",
    )
    parser.add_argument("file", type=Path, help="Statement PDF (or text file with --text)")
    parser.add_argument("--password", default="", help="PDF password, usually the PAN")
    parser.add_argument(
        "--output",
        type=Path,
        help="Where to write the JSON (default: <file stem>_output.json)",
    )
    parser.add_argument(
        "--text",
        action="store_true",
        help="Treat the input as already-extracted statement text",
    )
    parser.add_argument("--verbose", action="store_true", help="Log extraction diagnostics")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")

    output = args.output or args.file.with_name(f"{args.file.stem}_output.json")
    diagnostics = ExtractionDiagnostics()

    try:
        if args.text:
            text = args.file.read_text(encoding="utf-8")
        else:
            text = text_extractor.extract_text(args.file.read_bytes(), args.password or None)
        document = cas_extractor.extract(text, args.password, diagnostics=diagnostics)
    except OSError as e:
        print(f"Error: cannot read {args.file}: {e.strerror or e}", file=sys.stderr)
        return 1
    except UnicodeDecodeError:
        print(f"Error: {args.file} is not UTF-8 text", file=sys.stderr)
        return 1
    except StatementExtractionError as e:
        error_info = ERROR_MESSAGES.get(e.error_code, ERROR_MESSAGES["INTERNAL_ERROR"])
        print(f"Error [{e.error_code}]: {e.message}", file=sys.stderr)
        print(error_info["help"], file=sys.stderr)
        return 1

    rendered = json.dumps(document.to_dict(), indent=2, ensure_ascii=False)
    output.write_text(rendered + "\n", encoding="utf-8")
    print(rendered)

    logger.info("cli_output_written", output=str(output), diagnostics=diagnostics.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
