"""CLI entrypoint for the weg.li API client."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from wegli.api.client import WegliClient
from wegli.common.config_loader import ClientConfig, load_client_config
from wegli.common.constants import EXIT_HARD_FAIL, EXIT_NOT_FOUND, EXIT_SUCCESS
from wegli.common.errors import NotFoundError, WegliError
from wegli.common.fs import write_json_lines
from wegli.common.logging import build_logger, log_event
from wegli.export.records import read_export_notices

COMMANDS = (
    "charges",
    "charge",
    "districts",
    "district",
    "notices",
    "notice",
    "exports",
    "download",
    "convert",
)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", default="./config/wegli.yml")
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("charges")
    sub.add_parser("charge").add_argument("tbnr")
    sub.add_parser("districts")
    sub.add_parser("district").add_argument("zip")
    sub.add_parser("notices")
    sub.add_parser("notice").add_argument("token")

    exports = sub.add_parser("exports")
    exports.add_argument("--user", action="store_true", help="List the authenticated user's exports")

    download = sub.add_parser("download")
    download.add_argument("--dir", dest="target_dir", default=None)
    download.add_argument("--overwrite", action="store_true", default=None)
    download.add_argument("--unzip", action="store_true", default=None)
    download.add_argument("--user", action="store_true", help="Download the authenticated user's export")

    convert = sub.add_parser("convert")
    convert.add_argument("csv_path")
    convert.add_argument("--output", default=None, help="Write JSON lines here instead of stdout")
    return parser.parse_args(argv)


def _emit(payload: Any) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def execute_command(args: argparse.Namespace, client: WegliClient, cfg: ClientConfig, logger: logging.Logger) -> None:
    command = args.command
    if command == "charges":
        _emit([charge.to_json() for charge in client.get_charges()])
    elif command == "charge":
        _emit(client.get_charge(args.tbnr).to_json())
    elif command == "districts":
        _emit([district.to_json() for district in client.get_districts()])
    elif command == "district":
        _emit(client.get_district(args.zip).to_json())
    elif command == "notices":
        _emit([notice.to_json() for notice in client.get_notices()])
    elif command == "notice":
        _emit(client.get_notice(args.token).to_json())
    elif command == "exports":
        _emit([export.to_json() for export in client.get_exports(public=not args.user)])
    elif command == "download":
        path = client.download_latest_export(
            Path(args.target_dir) if args.target_dir else cfg.export.directory,
            overwrite=cfg.export.overwrite if args.overwrite is None else args.overwrite,
            unzip=cfg.export.unzip if args.unzip is None else args.unzip,
            public=cfg.export.public and not args.user,
        )
        _emit({"path": str(path)})
    elif command == "convert":
        notices = (notice.to_json() for notice in read_export_notices(Path(args.csv_path)))
        if args.output:
            rows = write_json_lines(Path(args.output), notices)
        else:
            rows = 0
            for payload in notices:
                sys.stdout.write(json.dumps(payload, ensure_ascii=False, sort_keys=True))
                sys.stdout.write("\n")
                rows += 1
        log_event(logger, "converted export rows", command=command, event="CONVERT", status="ok", rows=rows)
    else:
        raise ValueError(f"Unknown command: {command}")


def run_command(args: argparse.Namespace) -> int:
    logger = build_logger(level=args.log_level, log_path=Path(args.log_file) if args.log_file else None)
    overlay = Path(args.overlay_config) if args.overlay_config else None
    command = args.command

    try:
        cfg = load_client_config(Path(args.config), overlay_path=overlay)
    except WegliError as exc:
        log_event(logger, str(exc), command=command, event="CONFIG_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL

    log_event(logger, "command start", command=command, event="COMMAND_START", status="ok")
    with cfg.build_client() as client:
        try:
            execute_command(args, client, cfg, logger)
        except NotFoundError as exc:
            log_event(logger, str(exc), command=command, event="COMMAND_FAIL", status="error", error_code=exc.error_code)
            return EXIT_NOT_FOUND
        except WegliError as exc:
            log_event(logger, str(exc), command=command, event="COMMAND_FAIL", status="error", error_code=exc.error_code)
            return EXIT_HARD_FAIL
        except ValueError as exc:
            log_event(logger, str(exc), command=command, event="COMMAND_FAIL", status="error", error_code="INVALID_ARGUMENT")
            return EXIT_HARD_FAIL
    log_event(logger, "command end", command=command, event="COMMAND_END", status="ok")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
