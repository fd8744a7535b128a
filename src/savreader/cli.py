"""CLI entrypoints for savreader commands."""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict

from .analyzer import analyze_file, format_report
from .config import OUTPUT_FORMATS, ConfigError, SavReaderConfig, load_config
from .errors import FormatError, InvalidExtension
from .logging import configure_logging, get_logger
from .model import DecodedFile
from .sav_parser import parse_sav_file
from .serialization import decoded_to_csv, decoded_to_json, decoded_to_yaml

EXIT_FORMAT_ERROR = 1
EXIT_USAGE_ERROR = 2

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .savreader.yml or the directory holding it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="savreader",
        description="Decode $FL2 statistical data files into JSON, YAML or CSV.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser(
        "parse",
        help="Decode a .sav file and print the document.",
    )
    _add_verbose_option(parse_parser, suppress_default=True)
    _add_config_option(parse_parser)
    parse_parser.add_argument("path", help="Path to the .sav file.")
    parse_parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (defaults to the configured format, json).",
    )
    parse_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the document to this path instead of stdout.",
    )
    parse_parser.add_argument(
        "--envelope",
        action="store_true",
        help="Wrap the JSON document in a {success, filename, size, result} response.",
    )

    info_parser = subparsers.add_parser(
        "info",
        help="Print a summary report of a .sav file.",
    )
    _add_verbose_option(info_parser, suppress_default=True)
    _add_config_option(info_parser)
    info_parser.add_argument("path", help="Path to the .sav file.")

    return parser


def render_document(decoded: DecodedFile, fmt: str, indent: int = 2) -> str:
    """Render a decoded file in one of OUTPUT_FORMATS."""
    if fmt == "json":
        return decoded_to_json(decoded, indent=indent)
    if fmt == "yaml":
        return decoded_to_yaml(decoded)
    if fmt == "csv":
        return decoded_to_csv(decoded)
    raise ValueError(f"Unsupported output format: {fmt}")


def success_envelope(filename: str, size: int, result: str) -> Dict[str, Any]:
    return {"success": True, "filename": filename, "size": size, "result": result}


def error_envelope(message: str) -> Dict[str, Any]:
    return {
        "success": False,
        "error": message,
        "timestamp": int(time.time() * 1000),
    }


def _load_config(parser: argparse.ArgumentParser, path: str) -> SavReaderConfig:
    try:
        return load_config(Path(path))
    except ConfigError as exc:
        parser.exit(EXIT_USAGE_ERROR, f"Invalid configuration: {exc}\n")


def _decode_or_exit(
    parser: argparse.ArgumentParser, path: str, config: SavReaderConfig, envelope: bool = False
) -> DecodedFile:
    try:
        return parse_sav_file(path, config.decode)
    except InvalidExtension as exc:
        status, message = EXIT_USAGE_ERROR, str(exc)
    except OSError as exc:
        status, message = EXIT_FORMAT_ERROR, f"Cannot read {path}: {exc.strerror or exc}"
    except FormatError as exc:
        status, message = EXIT_FORMAT_ERROR, f"Error parsing file: {exc}"

    logger.debug("Decode of %s failed: %s", path, message)
    if envelope:
        print(json.dumps(error_envelope(message), indent=2))
        parser.exit(status)
    parser.exit(status, f"{message}\n")


def _run_parse(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    config = _load_config(parser, args.config)
    fmt = args.format or config.output.format
    if args.envelope and fmt != "json":
        parser.exit(EXIT_USAGE_ERROR, "--envelope requires JSON output\n")

    decoded = _decode_or_exit(parser, args.path, config, envelope=args.envelope)
    document = render_document(decoded, fmt, indent=config.output.indent)

    if args.envelope:
        path = Path(args.path)
        envelope = success_envelope(path.name, path.stat().st_size, document)
        document = json.dumps(envelope, indent=config.output.indent, ensure_ascii=False)

    if not document.endswith("\n"):
        document += "\n"
    if args.output:
        Path(args.output).write_text(document, encoding="utf-8")
        logger.info("Wrote %s output to %s", fmt, args.output)
    else:
        sys.stdout.write(document)


def _run_info(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    config = _load_config(parser, args.config)
    decoded = _decode_or_exit(parser, args.path, config)
    print(format_report(analyze_file(decoded)))


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for savreader commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "parse":
        _run_parse(parser, args)
    elif args.command == "info":
        _run_info(parser, args)


if __name__ == "__main__":  # pragma: no cover
    main()
