from __future__ import annotations

import argparse
import csv
import io
import json
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from gpconflict import __version__
from gpconflict.adapters.snapshot import SnapshotError
from gpconflict.app import resolve_scope_conflicts
from gpconflict.config import (
    ConfigurationError,
    ResolutionConfig,
    configure_logging,
    get_resolution_config,
)
from gpconflict.domain.resolution import REPORT_COLUMNS, ScopeResolutionError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from gpconflict.domain.resolution import ConflictReport

log = logging.getLogger(__name__)

OUTPUT_FORMATS = ("table", "json", "csv")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Report conflicting settings among policy objects linked to a scope"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Resolve conflicts for one scope")
    resolve.add_argument("scope", help="Scope identifier, e.g. an OU distinguished name")
    source = resolve.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--snapshot",
        type=str,
        help="Read links and policy exports from a JSON snapshot file",
    )
    source.add_argument(
        "--gateway",
        action="store_true",
        help="Query the directory gateway configured via GPCONFLICT_GATEWAY_URL",
    )
    resolve.add_argument(
        "--enforced-only",
        action="store_true",
        help="Only analyse enforced links (also GPCONFLICT_ENFORCED_ONLY)",
    )
    resolve.add_argument(
        "--no-machine",
        action="store_true",
        help="Skip machine-wide settings (also GPCONFLICT_INCLUDE_MACHINE=0)",
    )
    resolve.add_argument(
        "--no-user",
        action="store_true",
        help="Skip user-wide settings (also GPCONFLICT_INCLUDE_USER=0)",
    )
    resolve.add_argument(
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Enable debug logging",
    )
    resolve.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="table",
        help="Output format (default: %(default)s)",
    )
    return parser.parse_args(list(argv))


def _render_table(report: ConflictReport) -> str:
    if report.is_empty:
        return f"No conflicting settings found for {report.scope}"

    lines = [f"Conflicting settings for {report.scope} ({report.group_count} settings)"]
    current: tuple[str, str, str] | None = None
    for record in report.records:
        heading = (str(record.context), record.key_path, record.value_name)
        if heading != current:
            current = heading
            lines.append("")
            value_name = record.value_name or "(Default)"
            lines.append(f"[{record.context}] {record.key_path} :: {value_name}")
        marker = "  " if record.is_conflicting else "* "
        enforced = " enforced" if record.source_enforced else ""
        lines.append(
            f"  {marker}rank {record.source_precedence_rank:>3}{enforced} "
            f"{record.source_display_name or record.source_policy_id}: {record.value!r}"
        )
    return "\n".join(lines)


def _render_json(report: ConflictReport) -> str:
    document = {
        "scope": report.scope,
        "records": report.to_rows(),
        "warnings": [
            {
                "policy_id": warning.policy_id,
                "policy_name": warning.display_name,
                "reason": warning.reason,
            }
            for warning in report.warnings
        ],
    }
    return json.dumps(document, indent=2)


def _render_csv(report: ConflictReport) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(REPORT_COLUMNS), lineterminator="\n")
    writer.writeheader()
    writer.writerows(report.to_rows())
    return buffer.getvalue().rstrip("\n")


_RENDERERS = {"table": _render_table, "json": _render_json, "csv": _render_csv}


def _resolution_config(args: argparse.Namespace) -> ResolutionConfig:
    """Start from the environment and let explicit flags narrow it."""

    config = get_resolution_config()
    overrides: dict[str, bool] = {}
    if args.enforced_only:
        overrides["enforced_only"] = True
    if args.no_machine:
        overrides["include_machine"] = False
    if args.no_user:
        overrides["include_user"] = False
    return replace(config, **overrides) if overrides else config


def _run_resolve(args: argparse.Namespace) -> int:
    try:
        config = _resolution_config(args)
        report = resolve_scope_conflicts(args.scope, config=config, snapshot_path=args.snapshot)
    except (ConfigurationError, SnapshotError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except ScopeResolutionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for warning in report.warnings:
        print(f"Warning: skipped {warning}", file=sys.stderr)
    print(_RENDERERS[args.format](report))
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""

    load_dotenv()
    signal(SIGINT, sigint_handler)
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        exit_code = _run_resolve(args)
    except Exception as e:  # noqa: BLE001
        log.debug("Unhandled error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1
    sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    main()
