"""Command line interface.

Usage:
    runwatch list [--watch]
    runwatch watch RUN_ID [--svg-dir DIR] [--until-done]
    runwatch preset --symbol ETHUSDT --start 2026-01-01 --end 2026-02-10
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from runwatch.api.base import RunwatchError
from runwatch.api.http import HttpRunsClient
from runwatch.api.models import PresetRequest, RunRecord
from runwatch.config import Settings
from runwatch.live.run_list import RunListPoller, count_active
from runwatch.runner import configure_logging, watch_run
from runwatch.time_utils import parse_timestamp


def _format_created(raw: str) -> str:
    try:
        return parse_timestamp(raw).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return raw


def format_run_table(runs: list[RunRecord]) -> str:
    rows = [("CREATED", "NAME", "KIND", "STATUS", "ID")]
    rows += [(_format_created(r.created_at), r.name, r.kind, r.status, r.id) for r in runs]
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = ["  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip() for row in rows]
    lines.append(f"Active: {count_active(runs)}")
    return "\n".join(lines)


async def _list_runs(settings: Settings) -> list[RunRecord]:
    async with HttpRunsClient(settings) as api:
        return await api.list_runs()


def _print_run_list(poller: RunListPoller) -> None:
    if poller.last_error:
        print(f"Refresh failed: {poller.last_error}", file=sys.stderr)
    print(format_run_table(poller.runs), flush=True)


async def _watch_runs(settings: Settings, iterations: Optional[int] = None) -> None:
    async with HttpRunsClient(settings) as api:
        poller = RunListPoller(api, settings=settings)
        await poller.run(iterations, on_refresh=_print_run_list)


async def _create_preset(settings: Settings, request: PresetRequest) -> RunRecord:
    async with HttpRunsClient(settings) as api:
        return await api.create_mm_mtf_sweep_preset(request)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="runwatch", description="Monitor backtest/sweep runs.")
    parser.add_argument("--api-base-url", help="Run service URL (default: $RUNWATCH_API_BASE_URL)")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR")
    sub = parser.add_subparsers(dest="command", required=True)

    runs = sub.add_parser("list", help="List recent runs")
    runs.add_argument("--watch", action="store_true", help="Keep refreshing until interrupted")

    watch = sub.add_parser("watch", help="Poll a run and report progress")
    watch.add_argument("run_id")
    watch.add_argument("--svg-dir", type=Path, help="Write chart fragments here on every refresh")
    watch.add_argument("--until-done", action="store_true", help="Exit once the run finishes")

    preset = sub.add_parser("preset", help="Queue an MM MTF sweep run")
    preset.add_argument("--symbol", required=True)
    preset.add_argument("--start", required=True)
    preset.add_argument("--end", required=True)
    preset.add_argument("--maker-fee-bps-list", default="10")
    preset.add_argument("--htf-interval")
    preset.add_argument("--ltf-interval")
    preset.add_argument("--top-n", type=int)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    overrides = {}
    if args.api_base_url:
        overrides["api_base_url"] = args.api_base_url
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        settings = replace(settings, **overrides)

    configure_logging(settings.log_level)

    if not settings.api_base_url:
        print("API base URL is not set (RUNWATCH_API_BASE_URL or --api-base-url)", file=sys.stderr)
        return 2

    if args.command == "list" and args.watch:
        try:
            asyncio.run(_watch_runs(settings))
        except KeyboardInterrupt:
            # Ctrl-C is the only way out of --watch
            pass
        return 0

    if args.command == "watch":
        watch_run(args.run_id, settings, svg_dir=args.svg_dir, until_done=args.until_done)
        return 0

    try:
        if args.command == "list":
            print(format_run_table(asyncio.run(_list_runs(settings))))
        elif args.command == "preset":
            request = PresetRequest(
                symbol=args.symbol,
                start=args.start,
                end=args.end,
                maker_fee_bps_list=args.maker_fee_bps_list,
                htf_interval=args.htf_interval,
                ltf_interval=args.ltf_interval,
                top_n=args.top_n,
            )
            run = asyncio.run(_create_preset(settings, request))
            print(f"Created run {run.id} ({run.name}) status={run.status}")
    except (RunwatchError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
