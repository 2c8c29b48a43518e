"""Main CLI entry point for the compact-xml command-line tool.

Provides parsing reports, debug tree dumps and validation for XML files.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from compact_xml_parser import __version__
from compact_xml_parser.api import CompactXMLParser
from compact_xml_parser.shared.config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from compact_xml_parser.shared.logging import configure_logging, get_logger
from compact_xml_parser.shared.result import DiagnosticSeverity

XML_SUFFIXES = {".xml", ".xhtml", ".svg"}
MAX_REPORTED_ERRORS = 3
OUTPUT_FORMATS = ("json", "text")


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.parser_config = ParserConfig()
        self.output_format = "json"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Recognised keys: ``parser_preset`` (``lenient`` or ``strict``),
        ``parser`` (a ``ParserConfig`` mapping), ``output_format``.
        """
        config = cls()
        if not config_path.exists():
            return config

        try:
            with config_path.open() as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ConfigValidationError("CLI config file must hold a JSON object")

            parser_config = config.parser_config
            preset = data.get("parser_preset")
            if preset == "strict":
                parser_config = ParserConfig.strict()
            elif preset == "lenient":
                parser_config = ParserConfig.lenient()
            if "parser" in data:
                if not isinstance(data["parser"], dict):
                    raise ConfigValidationError(
                        "parser section must be a JSON object", field_name="parser"
                    )
                parser_config = ParserConfig.from_dict(data["parser"])

            output_format = data.get("output_format", config.output_format)
            if output_format not in OUTPUT_FORMATS:
                raise ConfigValidationError(
                    f"output_format must be one of {list(OUTPUT_FORMATS)}",
                    field_name="output_format",
                    suggestions=list(OUTPUT_FORMATS),
                )

            config.parser_config = parser_config
            config.output_format = output_format
        except (OSError, TypeError, ValueError, ConfigError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


class XMLProcessor:
    """Core XML processing logic for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.parser = CompactXMLParser(config=config.parser_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse a single XML file and return a report."""
        result = self.parser.parse_file(file_path)
        self.logger.debug(
            "Processed file",
            extra={"file": str(file_path), "success": result.success}
        )
        return {
            "file": str(file_path),
            "success": result.success,
            "root": result.root.name if result.root else None,
            "element_count": result.element_count,
            "consumed_bytes": result.consumed_bytes,
            "processing_time_ms": result.performance.processing_time_ms,
            "error": result.error.to_dict() if result.error else None,
            "diagnostics": [
                {
                    "severity": diag.severity.name,
                    "message": diag.message,
                    "component": diag.component
                } for diag in result.diagnostics
                if diag.severity is not DiagnosticSeverity.INFO
            ],
        }

    def find_xml_files(self, path: Path, recursive: bool = True) -> Iterator[Path]:
        """Find XML files in path."""
        if path.is_file():
            yield path
        elif path.is_dir():
            candidates = path.rglob("*") if recursive else path.glob("*")
            for candidate in sorted(candidates):
                if candidate.is_file() and candidate.suffix.lower() in XML_SUFFIXES:
                    yield candidate

    def batch_process(
        self, paths: List[Path], recursive: bool = True
    ) -> List[Dict[str, Any]]:
        """Process files and directories in order."""
        results = []
        for path in paths:
            if not path.exists():
                results.append({
                    "file": str(path),
                    "success": False,
                    "error": {"kind": "FILE_NOT_FOUND", "message": "File not found"},
                    "diagnostics": [],
                })
                continue
            for file_path in self.find_xml_files(path, recursive):
                results.append(self.process_single_file(file_path))
        return results


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="compact-xml",
        description="Compact recursive-descent XML parser"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse XML files")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files or directories to parse"
    )
    parse_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: json)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    _add_parser_options(parse_parser)

    # Dump command
    dump_parser = subparsers.add_parser("dump", help="Print the element tree")
    dump_parser.add_argument("path", type=Path, help="XML file to dump")
    _add_parser_options(dump_parser)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate XML files")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to validate"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=list(OUTPUT_FORMATS),
        default="text",
        help="Output format"
    )
    _add_parser_options(validate_parser)

    return parser


def _add_parser_options(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on mismatched closing tags and CDATA sections"
    )
    subparser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )


def _load_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig.from_file(args.config) if args.config else CLIConfig()
    if args.strict:
        config.parser_config = config.parser_config.override(
            strict_tag_matching=True,
            cdata_handling=ParserConfig.strict().cdata_handling,
        )

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.parser_config.logging_level)
    return config


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format processing results for output."""
    if format_type == "text":
        if not results:
            return "No results to display."

        successful = sum(1 for r in results if r.get("success", False))
        lines = [f"Processed {len(results)} files, {successful} successful", "-" * 60]

        for result in results:
            status = "OK  " if result.get("success", False) else "FAIL"
            lines.append(f"{status} {result['file']}")
            if result.get("success", False):
                lines.append(
                    f"     Root: {result.get('root')}, "
                    f"Elements: {result.get('element_count', 0)}, "
                    f"Time: {result.get('processing_time_ms', 0):.1f}ms"
                )
            elif result.get("error"):
                error = result["error"]
                lines.append(f"     Error: {error['kind']}: {error['message']}")

            warnings = [
                d for d in result.get("diagnostics", [])
                if d.get("severity") == "WARNING"
            ]
            for warning in warnings[:MAX_REPORTED_ERRORS]:
                lines.append(f"     Warning: {warning.get('message', '')}")
            if len(warnings) > MAX_REPORTED_ERRORS:
                lines.append(
                    f"     ... and {len(warnings) - MAX_REPORTED_ERRORS} more warnings"
                )

        return "\n".join(lines)

    return json.dumps(results, indent=2)


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    config = _load_config(args)
    output_format = args.format or config.output_format

    processor = XMLProcessor(config)
    results = processor.batch_process(args.paths, args.recursive)
    formatted_output = format_results(results, output_format)

    if args.output:
        try:
            args.output.write_text(formatted_output)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    if not results:
        return 1
    return 0 if all(r.get("success", False) for r in results) else 1


def cmd_dump(args: argparse.Namespace) -> int:
    """Handle dump command."""
    config = _load_config(args)
    result = CompactXMLParser(config=config.parser_config).parse_file(args.path)

    if result.root is not None:
        result.root.print_tree()
    if not result.success:
        message = str(result.error) if result.error else result.diagnostics[-1].message
        print(f"Error: {message}", file=sys.stderr)
        return 1
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    processor = XMLProcessor(_load_config(args))
    results = []

    for report in processor.batch_process(args.paths, recursive=False):
        warnings = [
            d for d in report.get("diagnostics", []) if d["severity"] == "WARNING"
        ]
        results.append({
            "file": report["file"],
            "valid": report["success"],
            "warnings": len(warnings),
            "error": report.get("error"),
        })

    if args.format == "json":
        print(json.dumps(results, indent=2))
    else:
        valid_count = sum(1 for r in results if r["valid"])
        print(f"Validated {len(results)} files, {valid_count} valid")
        print("-" * 50)
        for result in results:
            status = "OK  " if result["valid"] else "FAIL"
            print(f"{status} {result['file']}")
            if result["error"]:
                print(f"     Error: {result['error']['kind']}: {result['error']['message']}")

    return 0 if results and all(r["valid"] for r in results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "parse":
        return cmd_parse(args)
    if args.command == "dump":
        return cmd_dump(args)
    if args.command == "validate":
        return cmd_validate(args)

    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
