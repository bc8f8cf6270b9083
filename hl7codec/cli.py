#!/usr/bin/env python3

import argparse
import json
import logging
import sys
from pathlib import Path

from colorama import init, Fore, Style

from hl7codec import __version__
from hl7codec.config import get_settings
from hl7codec.errors import HL7Error
from hl7codec.hl7_generate import generate_hl7
from hl7codec.mdm_builder import MDMMessageData, generate_mdm, missing_required_inputs
from hl7codec.parse_hl7 import parse_hl7
from hl7codec.reference import document_rows
from hl7codec.serialization import document_to_dict
from hl7codec.validate_hl7 import should_validate_mdm, validate_mdm

# Initialize colorama for cross-platform colour output
init(autoreset=True)

logger = logging.getLogger("hl7codec")


def load_text_file(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Input file does not exist: {path}")
    return path.read_text()


def colour_error(msg):
    return f"{Fore.RED}❌ {msg}{Style.RESET_ALL}"


def colour_warning(msg):
    return f"{Fore.YELLOW}⚠ {msg}{Style.RESET_ALL}"


def colour_ok(msg):
    return f"{Fore.GREEN}✔ {msg}{Style.RESET_ALL}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="HL7 v2 parse / generate / MDM^T02 validation tool")

    # NOTE: input file is NOT required in builder mode
    parser.add_argument(
        "-i", "--input",
        type=str,
        help="Path to HL7 file"
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        help="Optional output file"
    )

    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print JSON output"
    )

    parser.add_argument(
        "--table",
        action="store_true",
        help="Output labelled field rows instead of the JSON tree"
    )

    parser.add_argument(
        "--canonical",
        action="store_true",
        help="Re-render the parsed message with canonical delimiters"
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Run the MDM^T02 profile check on MDM messages"
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate and exit without printing the parsed message"
    )

    parser.add_argument(
        "--build-mdm",
        type=str,
        metavar="JSON",
        help="Build an MDM^T02 message from a JSON file of form values"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version"
    )

    return parser


def configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else get_settings().log_level
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")


def write_or_print(text: str, output: str | None) -> None:
    if output:
        try:
            Path(output).write_text(text)
        except OSError as e:
            print(colour_error(f"Failed to write output: {e}"), file=sys.stderr)
            sys.exit(4)
        print(colour_ok(f"Wrote output to {output}"))
    else:
        print(text)


def run_build_mdm(args) -> None:
    try:
        raw = load_text_file(Path(args.build_mdm))
        data = MDMMessageData.model_validate(json.loads(raw))
    except Exception as e:
        print(colour_error(f"Error loading form values: {e}"), file=sys.stderr)
        sys.exit(1)

    missing = missing_required_inputs(data)
    if missing:
        print(colour_error("Form values incomplete:\n"))
        for err in missing:
            print(colour_error(f"  - {err}"))
        sys.exit(5)

    message = generate_mdm(data)
    logger.debug("Built MDM^T02 message with %d segments", message.count("\r") + 1)
    # Show segments on separate lines unless writing to a file
    write_or_print(message if args.output else message.replace("\r", "\n"), args.output)


def run_cli(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"hl7codec version {__version__}")
        sys.exit(0)

    configure_logging(args.debug)

    # ==========================================================
    # BUILDER MODE (NO INPUT REQUIRED)
    # ==========================================================
    if args.build_mdm:
        run_build_mdm(args)
        return

    if not args.input:
        print(colour_error("You must provide -i/--input unless using --build-mdm"))
        sys.exit(1)

    # === LOAD HL7 ===
    try:
        hl7_raw = load_text_file(Path(args.input))
    except Exception as e:
        print(colour_error(f"Error loading HL7 file: {e}"), file=sys.stderr)
        sys.exit(1)

    # === PARSE HL7 ===
    result = parse_hl7(hl7_raw)
    if not result.success:
        print(colour_error(f"Failed to parse HL7: {result.error}"), file=sys.stderr)
        sys.exit(2)

    for warning in result.warnings:
        print(colour_warning(warning), file=sys.stderr)

    print(colour_ok(f"Message type: {result.message_type}"), file=sys.stderr)

    # === VALIDATION ===
    if args.validate or args.validate_only:
        if not should_validate_mdm(result.message_type):
            print(colour_warning(
                f"No profile check for message type {result.message_type}"
            ), file=sys.stderr)
        else:
            report = validate_mdm(result.document)
            for warning in report.warnings:
                print(colour_warning(warning), file=sys.stderr)
            if not report.valid:
                print(colour_error("MDM^T02 Validation Failed:\n"), file=sys.stderr)
                for err in report.errors:
                    print(colour_error(f"  - {err}"), file=sys.stderr)
                sys.exit(5)
            print(colour_ok("MDM^T02 validation passed."), file=sys.stderr)

        if args.validate_only:
            sys.exit(0)

    # === OUTPUT ===
    if args.canonical:
        try:
            text = generate_hl7(result.document, get_settings().segment_order)
        except HL7Error as e:
            print(colour_error(f"Failed to render HL7: {e}"), file=sys.stderr)
            sys.exit(2)
        write_or_print(text if args.output else text.replace("\r", "\n"), args.output)
        return

    payload = document_rows(result.document) if args.table else document_to_dict(result.document)
    write_or_print(json.dumps(payload, indent=2 if args.pretty else None), args.output)


if __name__ == "__main__":
    run_cli()
