from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Optional, TextIO

from .argbuilder import build_command_preview
from .logging_utils import configure_logging
from .params import ParameterSet, TestMode
from .profile_store import load_profile, save_profile
from .supervisor import ProcessSupervisor

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_S = 0.2


def _parse_assignment(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {text!r}")
    return key.strip(), value


def params_from_args(args: argparse.Namespace) -> ParameterSet:
    params = load_profile(args.profile) if args.profile else ParameterSet()

    overrides = dict(args.set or [])
    if args.url is not None:
        overrides["url"] = args.url
    if args.mode is not None:
        overrides["test_mode"] = args.mode
    if args.binary is not None:
        overrides["custom_binary_path"] = args.binary
    return params.update(overrides)


def follow_run(
    supervisor: ProcessSupervisor,
    out: TextIO,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL_S,
) -> None:
    """Print output lines as they arrive until the run releases the gate."""

    shown = 0
    while True:
        running = supervisor.is_running
        lines = supervisor.output.snapshot()
        for line in lines[shown:]:
            out.write(line + "\n")
        out.flush()
        shown = len(lines)
        if not running:
            return
        time.sleep(poll_interval)


def cmd_preview(args: argparse.Namespace) -> int:
    print(build_command_preview(params_from_args(args)))
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    params = params_from_args(args)
    supervisor = ProcessSupervisor()
    supervisor.launch(params)
    follow_run(supervisor, sys.stdout, poll_interval=float(args.poll_interval))
    supervisor.wait()

    if supervisor.last_returncode is None:
        return 1
    return supervisor.last_returncode if supervisor.last_returncode >= 0 else 1


def cmd_init_profile(args: argparse.Namespace) -> int:
    save_profile(args.path, ParameterSet())
    print(args.path)
    return 0


def _add_param_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--profile", default=None, help="Profile to start from (json|yaml)")
    p.add_argument("--url", default=None, help="Target URL")
    p.add_argument("--mode", default=None, choices=[m.value for m in TestMode], help="Test mode")
    p.add_argument("--binary", default=None, help="Path to the slowhttptest binary (default: search PATH)")
    p.add_argument(
        "--set",
        action="append",
        type=_parse_assignment,
        metavar="FIELD=VALUE",
        help="Override any parameter field, e.g. --set connections=200",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="slowhttp-launcher")
    p.add_argument("--log", default=None, help="Also write the launcher log to this file")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("preview", help="Print the command line that would be run")
    _add_param_options(sp)
    sp.set_defaults(func=cmd_preview)

    sp = sub.add_parser("run", help="Run slowhttptest and stream its output")
    _add_param_options(sp)
    sp.add_argument("--poll-interval", type=float, default=DEFAULT_POLL_INTERVAL_S)
    sp.set_defaults(func=cmd_run)

    sp = sub.add_parser("init-profile", help="Write the default parameters to a profile file")
    sp.add_argument("path")
    sp.set_defaults(func=cmd_init_profile)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log, verbose=args.verbose)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
