"""Command-line entry point for perf-xray."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from . import __version__
from .checker import apply_filters, check_file, check_files
from .config import Config, load_config
from .errors import PerfXrayError
from .report import FORMATS, TOOL_NAME, build_markdown, colorize, color_enabled, format_findings, format_summary
from .result import ScanResult
from .rules.catalog import RULES
from .utils import read_text_file, walk_files

logger = logging.getLogger(__name__)

COMMANDS = ("scan", "check", "report", "rules")
DEFAULT_REPORT_PATH = "perf-xray-report.md"
EXIT_ERROR = 2
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
GLOBAL_OPTIONS = ("-v", "--verbose")
GLOBAL_OPTIONS_WITH_VALUE = ("--config",)
EXIT_EARLY_OPTIONS = ("-h", "--help", "--version")


def add_global_options(parser: argparse.ArgumentParser, default: object = None) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False if default is None else default,
        help="Log progress and skipped files to stderr.",
    )
    parser.add_argument(
        "--config",
        default=default,
        help="YAML config file (defaults to $PERFXRAY_CONFIG or .perfxray.yaml).",
    )


def build_parser() -> argparse.ArgumentParser:
    # Subcommands repeat the global options without overriding values given before the command.
    common = argparse.ArgumentParser(add_help=False)
    add_global_options(common, argparse.SUPPRESS)

    severity = argparse.ArgumentParser(add_help=False)
    severity.add_argument(
        "-s",
        "--severity",
        default=None,
        help="Minimum severity to report: low|medium|high|critical.",
    )

    parser = argparse.ArgumentParser(
        prog=TOOL_NAME,
        description="X-ray your codebase for performance anti-patterns.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    add_global_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        parents=[common, severity],
        help="Scan a directory for performance issues (default command).",
    )
    scan_parser.add_argument("path", nargs="?", default=".", help="Directory to scan.")
    scan_parser.add_argument("-f", "--format", choices=FORMATS, default=None, help="Output format.")
    scan_parser.add_argument("-i", "--ignore", default=None, help="Comma-separated directory names to skip.")
    scan_parser.add_argument("--fix", action="store_true", help="Include fix suggestions in output.")
    scan_parser.add_argument("-j", "--jobs", type=int, default=None, help="Number of files checked in parallel.")
    scan_parser.add_argument(
        "-o",
        "--output",
        dest="output_path",
        default=None,
        help="Write the rendered findings to this file instead of stdout.",
    )

    check_parser = subparsers.add_parser(
        "check",
        parents=[common, severity],
        help="Check a single file for performance issues.",
    )
    check_parser.add_argument("file", help="Source file to check.")
    check_parser.add_argument("-f", "--format", choices=FORMATS, default=None, help="Output format.")
    check_parser.add_argument("--fix", action="store_true", help="Include fix suggestions in output.")

    report_parser = subparsers.add_parser(
        "report",
        parents=[common, severity],
        help="Generate a Markdown performance report.",
    )
    report_parser.add_argument("path", nargs="?", default=".", help="Directory to scan.")
    report_parser.add_argument(
        "-o",
        "--output",
        dest="output_path",
        default=DEFAULT_REPORT_PATH,
        help=f"Report file (default: {DEFAULT_REPORT_PATH}).",
    )
    report_parser.add_argument("-i", "--ignore", default=None, help="Comma-separated directory names to skip.")

    rules_parser = subparsers.add_parser("rules", parents=[common], help="List all available rules.")
    rules_parser.add_argument("-f", "--format", choices=("text", "json"), default="text", help="Listing format.")

    return parser


def parse_ignore(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _status_stream(report_format: str) -> TextIO:
    """Keep stdout machine-readable for JSON output."""

    return sys.stderr if report_format == "json" else sys.stdout


def _emit(output: str, output_path: Optional[str]) -> None:
    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(output + "\n", encoding="utf-8")
        print(f"  Output written to {output_path}", file=sys.stderr)
    elif output:
        print(output)


def run_scan(args: argparse.Namespace, config: Config) -> int:
    report_format = args.format or config.format
    severity = args.severity or config.severity
    ignore = list(config.ignore) + parse_ignore(args.ignore)
    jobs = args.jobs or config.jobs
    root = Path(args.path).resolve()
    status = _status_stream(report_format)
    color = color_enabled()

    if not root.exists():
        print(f"  Path not found: {root}", file=sys.stderr)
        return EXIT_ERROR

    print(f"\n  {colorize(TOOL_NAME, 'blue', color)} scanning {root} ...", file=status)
    files = walk_files(root, ignore=ignore)
    if not files:
        print(colorize("  No supported source files found.", "yellow", color), file=status)
        return 0

    findings = check_files(files, read_text_file, rules=config.active_rules(), jobs=jobs)
    filtered = apply_filters(findings, severity=severity, fix=args.fix)

    _emit(format_findings(filtered, report_format, color=False if args.output_path else None), args.output_path)
    print(format_summary(filtered), file=status)
    return ScanResult.from_findings(filtered).exit_code()


def run_check(args: argparse.Namespace, config: Config) -> int:
    report_format = args.format or config.format
    path = Path(args.file).resolve()
    try:
        content = read_text_file(path)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"  Error reading file: {exc}", file=sys.stderr)
        return EXIT_ERROR

    findings = check_file(str(path), content, rules=config.active_rules())
    filtered = apply_filters(findings, severity=args.severity or config.severity, fix=args.fix)

    output = format_findings(filtered, report_format)
    if output:
        print(output)
    print(format_summary(filtered), file=_status_stream(report_format))
    return ScanResult.from_findings(filtered).exit_code()


def run_report(args: argparse.Namespace, config: Config) -> int:
    severity = args.severity or config.severity
    ignore = list(config.ignore) + parse_ignore(args.ignore)
    root = Path(args.path).resolve()
    if not root.exists():
        print(f"  Path not found: {root}", file=sys.stderr)
        return EXIT_ERROR

    color = color_enabled()
    print(f"\n  {colorize(TOOL_NAME, 'blue', color)} generating report for {root} ...")
    files = walk_files(root, ignore=ignore)
    findings = check_files(files, read_text_file, severity=severity, rules=config.active_rules(), jobs=config.jobs)

    out_file = Path(args.output_path).resolve()
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(build_markdown(findings) + "\n", encoding="utf-8")

    print(format_summary(findings))
    print(f"  {colorize('Report saved:', 'green', color)} {out_file}\n")
    return ScanResult.from_findings(findings).exit_code()


def run_rules(args: argparse.Namespace, config: Config) -> int:
    if args.format == "json":
        payload = [
            {
                "id": rule.id,
                "name": rule.name,
                "severity": rule.severity.value,
                "languages": sorted(rule.languages),
                "message": rule.message,
                "suggestion": rule.suggestion,
                "enabled": rule.id not in config.disable,
            }
            for rule in RULES
        ]
        print(json.dumps(payload, indent=2))
        return 0

    color = color_enabled()
    print(f"\n  {colorize(TOOL_NAME, 'blue', color)} rules\n")
    for rule in RULES:
        state = "" if rule.id not in config.disable else "  (disabled)"
        languages = ", ".join(sorted(rule.languages))
        print(f"  {rule.severity.value:<8}  {rule.id:<22}  {languages:<16}  {rule.name}{state}")
    print()
    return 0


HANDLERS = {
    "scan": run_scan,
    "check": run_check,
    "report": run_report,
    "rules": run_rules,
}


def _with_default_command(argv: List[str]) -> List[str]:
    """Insert ``scan`` after any leading global options when no command is named."""

    index = 0
    while index < len(argv):
        token = argv[index]
        if token in GLOBAL_OPTIONS or token.startswith("--config="):
            index += 1
        elif token in GLOBAL_OPTIONS_WITH_VALUE:
            index += 2
        else:
            break
    if index < len(argv) and (argv[index] in COMMANDS or argv[index] in EXIT_EARLY_OPTIONS):
        return argv
    return [*argv[:index], "scan", *argv[index:]]


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(_with_default_command(list(sys.argv[1:] if argv is None else argv)))
    configure_logging(args.verbose)

    try:
        config = load_config(args.config)
        return HANDLERS[args.command](args, config)
    except PerfXrayError as exc:
        logger.debug("Operational error", exc_info=True)
        print(f"  Error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
