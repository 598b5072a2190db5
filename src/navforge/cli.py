"""Command-line diagnostics for the sampling controller and director log."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterator, TextIO
import sys

from pydantic import ValidationError

from navforge.config import Settings
from navforge.factory import build_pilot, build_recorder, build_role_defaults, build_store
from navforge.profiles import ProfileConfigError
from navforge.state import Telemetry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="navforge", description="navforge diagnostics")
    sub = parser.add_subparsers(dest="command", required=True)

    replay = sub.add_parser("replay", help="Replay telemetry through the controller")
    replay.add_argument("telemetry", type=str, help="JSONL file, one telemetry sample per line")
    replay.add_argument("--profile", dest="profile", help="Builtin profile name")
    replay.add_argument("--profile-file", dest="profile_file", help="YAML role defaults")
    replay.add_argument("--token-buffer-ratio", type=float, dest="token_buffer_ratio")

    events = sub.add_parser("events", help="Show or clear recorded director events")
    events.add_argument("--store", dest="store", help="SQLite store path")
    events.add_argument("--clear", action="store_true", dest="clear")
    return parser


def read_telemetry(path: Path) -> Iterator[Telemetry]:
    with path.open("r", encoding="utf-8") as handle:
        for line_no, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                yield Telemetry.model_validate_json(line)
            except ValidationError as exc:
                raise SystemExit(
                    f"{path}:{line_no}: invalid telemetry ({exc.error_count()} errors)"
                ) from exc


def run_replay(args: argparse.Namespace, settings: Settings, out: TextIO) -> int:
    try:
        defaults = build_role_defaults(settings, args.profile, args.profile_file)
    except ProfileConfigError as exc:
        raise SystemExit(str(exc)) from exc
    pilot = build_pilot(settings, task_id="replay", defaults=defaults)
    for telemetry in read_telemetry(Path(args.telemetry)):
        pilot.observe(telemetry)
        plan = pilot.plan(token_buffer_ratio=args.token_buffer_ratio)
        record = {
            "step": pilot.step,
            "state": plan.state.model_dump(),
            "planner": plan.planner.to_request_params(),
            "navigator": plan.navigator.to_request_params(),
            "constraints": plan.constraints.model_dump(),
        }
        out.write(json.dumps(record, ensure_ascii=False) + "\n")
    return 0


def run_events(args: argparse.Namespace, settings: Settings, out: TextIO) -> int:
    recorder = build_recorder(settings, build_store(settings, args.store))
    if args.clear:
        recorder.clear()
        out.write("cleared\n")
        return 0
    for event in recorder.get_events():
        out.write(event.model_dump_json(exclude_none=True) + "\n")
    return 0


def main(argv: list[str] | None = None, out: TextIO | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    stream = out or sys.stdout
    if args.command == "replay":
        return run_replay(args, settings, stream)
    return run_events(args, settings, stream)


if __name__ == "__main__":
    raise SystemExit(main())
