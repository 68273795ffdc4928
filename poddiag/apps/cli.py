from __future__ import annotations

import argparse
import json
import logging
import sys
import uuid
from pathlib import Path
from typing import Any

from poddiag.config import CONFIG_FILE_NAME, ConfigError, Settings, config_dir_path, load_settings, write_default_config
from poddiag.core.format import format_duration
from poddiag.core.service import StatusService
from poddiag.logging import TRACE_LEVEL, parse_log_level, setup_logging, trace_context


log = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="poddiag", description="Pod detailed status decoder and PDM ref codes.")
    _add_logging_args(parser)
    _add_settings_args(parser)

    sub = parser.add_subparsers(dest="cmd", required=True)

    decode_p = sub.add_parser("decode", help="Decode a detailed status payload")
    _add_logging_args(decode_p)
    _add_payload_arg(decode_p)
    decode_p.add_argument("--report", action="store_true", help="Print the human readable report instead of JSON")

    ref_p = sub.add_parser("ref", help="Print the PDM style Ref code for a payload")
    _add_logging_args(ref_p)
    _add_payload_arg(ref_p)

    duration_p = sub.add_parser("duration", help="Format a minute count as days plus HH:MM")
    _add_logging_args(duration_p)
    duration_p.add_argument("minutes", type=int, help="Minutes (e.g. 4380)")

    config_p = sub.add_parser("config", help="Configuration")
    _add_logging_args(config_p)
    config_sub = config_p.add_subparsers(dest="config_cmd", required=True)
    config_show_p = config_sub.add_parser("show", help="Show resolved settings")
    _add_logging_args(config_show_p)
    config_init_p = config_sub.add_parser("init", help="Write a default poddiag.json")
    _add_logging_args(config_init_p)
    config_init_p.add_argument("--force", action="store_true", help="Overwrite an existing file")

    tui_p = sub.add_parser("tui", help="Run Textual TUI")
    _add_logging_args(tui_p)
    tui_p.add_argument("payload", nargs="?", default=None, help="Optional payload to decode on start")

    args = parser.parse_args(argv)

    level_name: str | None = getattr(args, "log_level", None)
    if getattr(args, "trace", False):
        level = TRACE_LEVEL
    elif getattr(args, "verbose", False):
        level = logging.DEBUG
    else:
        level = parse_log_level(level_name)

    setup_logging(
        level=level,
        log_format=str(getattr(args, "log_format", "pretty") or "pretty"),
        log_file=getattr(args, "log_file", None),
        no_color=bool(getattr(args, "no_color", False)),
    )

    trace_id = uuid.uuid4().hex[:12]
    with trace_context(trace_id):
        log.debug("CLI start", extra={"cmd": getattr(args, "cmd", None)})
        _dispatch(args)


def _dispatch(args: argparse.Namespace) -> None:
    if args.cmd == "duration":
        if args.minutes < 0:
            _print_json({"ok": False, "error": "minutes must not be negative"})
            raise SystemExit(1)
        _print_json({"ok": True, "minutes": args.minutes, "duration": format_duration(args.minutes)})
        raise SystemExit(0)

    if args.cmd == "config" and args.config_cmd == "init":
        path = config_dir_path(args.config_dir) / CONFIG_FILE_NAME
        if path.exists() and not args.force:
            _print_json({"ok": False, "error": f"{path} already exists (use --force)"})
            raise SystemExit(1)
        write_default_config(path)
        log.info("Wrote default config", extra={"path": str(path)})
        _print_json({"ok": True, "path": str(path)})
        raise SystemExit(0)

    try:
        settings = _load_settings(args)
    except ConfigError as exc:
        log.error("Invalid configuration", extra={"error": str(exc)})
        _print_json({"ok": False, "error": str(exc)})
        raise SystemExit(2)

    if args.cmd == "config" and args.config_cmd == "show":
        _print_json({"ok": True, "settings": settings.to_dict()})
        raise SystemExit(0)

    if args.cmd == "tui":
        from poddiag.apps.tui import run_tui

        run_tui(StatusService(settings), payload=args.payload)
        return None

    service = StatusService(settings)

    if args.cmd == "decode":
        response = service.decode(_read_payload(args.payload))
        if args.report and response.get("ok"):
            sys.stdout.write(str(response["report"]))
        else:
            _print_json(response)
        raise SystemExit(0 if response.get("ok") else 1)

    if args.cmd == "ref":
        response = service.decode(_read_payload(args.payload))
        if response.get("ok"):
            response = {"ok": True, "faulted": response["faulted"], "ref": response["ref"]}
        _print_json(response)
        raise SystemExit(0 if response.get("ok") else 1)

    raise SystemExit("error: unknown command")


def _load_settings(args: argparse.Namespace) -> Settings:
    return load_settings(
        config_dir=args.config_dir,
        pulse_size=args.pulse_size,
        maximum_reservoir_reading=args.max_reservoir,
        ref_label=args.ref_label,
    )


def _read_payload(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    return value


def _add_payload_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("payload", help="Payload as hex (e.g. 021604...), or - to read from stdin")


def _add_settings_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config-dir", type=Path, default=None, help="Override config dir (default: ~/.config/poddiag)")
    parser.add_argument("--pulse-size", type=float, default=None, help="Units per pulse (default: 0.05)")
    parser.add_argument(
        "--max-reservoir",
        type=float,
        default=None,
        help="Maximum reservoir reading in units; higher readings are reported as 50+ (default: 50)",
    )
    parser.add_argument("--ref-label", default=None, help="Label printed before the Ref digits (default: Ref)")


def _add_logging_args(parser: argparse.ArgumentParser) -> None:
    # SUPPRESS defaults keep root-level flags (placed before the subcommand)
    # from being overwritten by subparser defaults.
    parser.add_argument(
        "--log-level",
        choices=["error", "warning", "info", "debug", "trace"],
        default=argparse.SUPPRESS,
        help="Logging level (default: info)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Alias for --log-level=debug",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Alias for --log-level=trace",
    )
    parser.add_argument("--log-file", default=argparse.SUPPRESS, help="Optional log file path")
    parser.add_argument(
        "--log-format",
        choices=["pretty", "json"],
        default=argparse.SUPPRESS,
        help="Log output format (default: pretty)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Disable ANSI colors in pretty logs",
    )


def _print_json(payload: dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(payload, sort_keys=True, indent=2) + "\n")


if __name__ == "__main__":
    main()
