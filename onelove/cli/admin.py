"""Admin command-line tool.

Runs the server-side functions from a shell against the configured
backend, printing the same JSON the HTTP endpoints return.

Usage::

    python -m onelove.cli scan-all
    python -m onelove.cli scan-single <track-id>
    python -m onelove.cli analyze "some lyrics" [--track-id ID]
    python -m onelove.cli newsletter
    python -m onelove.cli subscribe fan@example.com
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from onelove.config.settings import Settings
from onelove.utils.errors import OneLoveError
from onelove.utils.logging import configure_logging


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


async def _handle_scan_all(args: argparse.Namespace, components: dict[str, Any]) -> int:
    result = await components["content_scanner"].scan_all()
    _print_json(result.model_dump(mode="json"))
    return 0


async def _handle_scan_single(args: argparse.Namespace, components: dict[str, Any]) -> int:
    result = await components["content_scanner"].scan_single(args.track_id)
    _print_json(result.model_dump(mode="json"))
    return 0


async def _handle_analyze(args: argparse.Namespace, components: dict[str, Any]) -> int:
    scanner = components["content_scanner"]
    if not scanner.ai_enabled:
        print("Error: AI_GATEWAY_API_KEY is not configured.", file=sys.stderr)
        return 1
    verdict = await scanner.analyze_lyrics(args.text, args.track_id)
    _print_json(verdict.model_dump(mode="json"))
    return 0


async def _handle_newsletter(args: argparse.Namespace, components: dict[str, Any]) -> int:
    result = await components["newsletter"].send()
    _print_json(result.model_dump(mode="json", exclude_none=True))
    return 0


async def _handle_subscribe(args: argparse.Namespace, components: dict[str, Any]) -> int:
    result = await components["subscriptions"].subscribe(args.email)
    _print_json(result.model_dump(mode="json"))
    return 0


_HANDLERS = {
    "scan-all": _handle_scan_all,
    "scan-single": _handle_scan_single,
    "analyze": _handle_analyze,
    "newsletter": _handle_newsletter,
    "subscribe": _handle_subscribe,
}


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    from onelove.main import build_components

    # Importing main configures logging for the web service; re-point it
    # at stderr so stdout carries only the JSON result.
    configure_logging(
        log_level=app_settings.log_level,
        json_output=(app_settings.app_env == "production"),
        stream=sys.stderr,
        cache_loggers=False,
    )
    components = build_components(app_settings)
    store = components["content_store"]
    await store.initialize()
    try:
        return await _HANDLERS[args.command](args, components)
    except OneLoveError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        await store.close()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m onelove.cli",
        description="Run One Love content functions from the command line.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("scan-all", help="Flag every explicit track in the catalogue")

    single = subparsers.add_parser("scan-single", help="Scan one media record")
    single.add_argument("track_id", help="Media record id")

    analyze = subparsers.add_parser("analyze", help="AI-classify a lyric or title")
    analyze.add_argument("text", help="Text to classify")
    analyze.add_argument("--track-id", dest="track_id", default=None,
                         help="Flag this record when the text is explicit")

    subparsers.add_parser("newsletter", help="Generate and store the weekly newsletter draft")

    subscribe = subparsers.add_parser("subscribe", help="Add a newsletter subscriber")
    subscribe.add_argument("email", help="Subscriber email address")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse ``argv`` and run one command.  Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    return asyncio.run(_run(args, Settings()))
