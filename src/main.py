# src/main.py — v2
"""CLI entry point — inspect and drive regeneration decisions.

Usage:
    smartregen --config traits.json status
    smartregen --config traits.json detect
    smartregen --config traits.json regenerate [category ...]
    smartregen --config traits.json force [category]
    smartregen --config traits.json estimate
    smartregen --config traits.json diff
    smartregen reset

Results are printed as JSON on stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from smartregen.version import __version__

if TYPE_CHECKING:
    from smartregen.regeneration.tracker import ChangeTracker

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="smartregen",
        description=f"smartregen v{__version__} - change-aware trait regeneration",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None,
        help="JSON file with category, global style and style engine settings",
    )
    parser.add_argument(
        "--store", choices=["auto", "sqlite", "json", "memory"], default=None,
        help="Fingerprint store backend (default: STORE_BACKEND)",
    )

    subparsers = parser.add_subparsers(dest="command")

    p_status = subparsers.add_parser("status", help="Show tracker status")
    p_status.set_defaults(func=_cmd_status)

    p_detect = subparsers.add_parser("detect", help="Report changed categories")
    p_detect.set_defaults(func=_cmd_detect)

    p_regen = subparsers.add_parser(
        "regenerate", help="Mark changed (and requested) categories regenerated",
    )
    p_regen.add_argument(
        "categories", nargs="*",
        help="Categories to regenerate even if unchanged",
    )
    p_regen.set_defaults(func=_cmd_regenerate)

    p_force = subparsers.add_parser(
        "force", help="Forget fingerprints so the next pass regenerates",
    )
    p_force.add_argument(
        "category", nargs="?", default=None,
        help="Single category (default: all)",
    )
    p_force.set_defaults(func=_cmd_force)

    p_estimate = subparsers.add_parser(
        "estimate", help="Estimate cost and time of the changed set",
    )
    p_estimate.set_defaults(func=_cmd_estimate)

    p_diff = subparsers.add_parser("diff", help="Print a diff report")
    p_diff.set_defaults(func=_cmd_diff)

    p_reset = subparsers.add_parser("reset", help="Clear all stored fingerprints")
    p_reset.set_defaults(func=_cmd_reset)

    return parser


async def _run(args: argparse.Namespace) -> int:
    """Load settings, open the tracker and dispatch the subcommand."""
    from smartregen.api.facade import open_tracker
    from smartregen.config.settings import load_settings
    from smartregen.events.sinks import LoggingEventSink
    from smartregen.logging.logger import setup_logging_from_settings
    from smartregen.providers.dict_config_provider import DictConfigProvider

    overrides: dict[str, Any] = {}
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    if args.store:
        overrides["store_backend"] = args.store
    settings = load_settings(**overrides)
    setup_logging_from_settings(settings)

    provider = None
    if args.config is not None:
        if not args.config.is_file():
            logger.error("Config file not found: %s", args.config)
            return 1
        provider = DictConfigProvider.from_json_file(args.config)

    tracker = await open_tracker(
        settings=settings, provider=provider, event_sink=LoggingEventSink(),
    )
    try:
        return await args.func(tracker, args)
    finally:
        tracker.store.close()


async def _cmd_status(tracker: ChangeTracker, args: argparse.Namespace) -> int:
    _print_json(tracker.get_status().model_dump(mode="json"))
    return 0


async def _cmd_detect(tracker: ChangeTracker, args: argparse.Namespace) -> int:
    report = await tracker.detect_changes()
    _print_json(report.model_dump(mode="json"))
    return 0


async def _cmd_regenerate(tracker: ChangeTracker, args: argparse.Namespace) -> int:
    requested = args.categories or None
    plan = await tracker.regenerate_changed(requested)
    _print_json({
        "regenerated": plan.regenerated,
        "skipped": plan.skipped,
        "message": plan.message,
    })
    return 0


async def _cmd_force(tracker: ChangeTracker, args: argparse.Namespace) -> int:
    if args.category is None:
        result = await tracker.force_regenerate_all()
    else:
        if args.category not in tracker.categories:
            logger.error("Unknown category: %s", args.category)
            return 1
        result = await tracker.force_regenerate_category(args.category)
    _print_json(result.model_dump(mode="json"))
    return 0


async def _cmd_estimate(tracker: ChangeTracker, args: argparse.Namespace) -> int:
    report = await tracker.detect_changes()
    changed = report.changed_categories
    savings = await tracker.estimate_cache_savings(changed)
    _print_json({
        "changed": report.changed_names,
        "cost": tracker.estimate_regeneration_cost(changed).model_dump(mode="json"),
        "time": tracker.estimate_regeneration_time(changed).model_dump(mode="json"),
        "cache_savings": savings.model_dump(mode="json"),
    })
    return 0


async def _cmd_diff(tracker: ChangeTracker, args: argparse.Namespace) -> int:
    from smartregen.regeneration.diff_report import generate_diff_report

    report = await generate_diff_report(tracker)
    _print_json(report.model_dump(mode="json"))
    return 0


async def _cmd_reset(tracker: ChangeTracker, args: argparse.Namespace) -> int:
    await tracker.reset()
    _print_json({"message": "Stored fingerprints cleared"})
    return 0


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


if __name__ == "__main__":
    sys.exit(main())
