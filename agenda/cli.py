"""CLI entrypoint for validating and maintaining party records."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from agenda.common.config_loader import load_settings
from agenda.common.constants import EXIT_HARD_FAIL, EXIT_REJECTED, EXIT_SUCCESS, KINDS
from agenda.common.errors import AgendaError, NotFoundError, RecordValidationError
from agenda.common.logging import build_logger, log_event
from agenda.common.models import KIND_BY_NAME
from agenda.notify import HttpNotificationSender
from agenda.reconcile.service import PartyService, build_service
from agenda.store.json_file import JsonFileRecordStore
from agenda.validation.checksum import checksum_valid

COMMANDS = ("check-id", "create", "update", "show", "search", "delete", "list")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("value", nargs="?", default=None, help="tax identifier or prefix")
    parser.add_argument("--kind", default="individual", choices=KINDS)
    parser.add_argument("--data", default=None, help="JSON object with record fields")
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--store", default=None, help="override the JSON store path from settings")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--log-file", default=None)
    return parser.parse_args(argv)


def _print(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))


def _payload(args: argparse.Namespace) -> dict:
    if not args.data:
        raise AgendaError("--data is required for this command")
    try:
        payload = json.loads(args.data)
    except json.JSONDecodeError as exc:
        raise AgendaError(f"--data must be valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise AgendaError("--data must be a JSON object")
    return payload


def _require_value(args: argparse.Namespace) -> str:
    if not args.value:
        raise AgendaError(f"{args.command} needs an identifier argument")
    return args.value


def execute_command(args: argparse.Namespace, service: PartyService) -> int:
    kind = KIND_BY_NAME[args.kind]
    if args.command == "create":
        record = service.create(kind.model.from_dict(_payload(args)))
        _print(record.to_dict())
    elif args.command == "update":
        record = service.update(_require_value(args), kind.model.from_dict(_payload(args)))
        _print(record.to_dict())
    elif args.command == "show":
        record = service.get(_require_value(args))
        if record is None:
            raise NotFoundError(kind.not_found_message)
        _print(record.to_dict())
    elif args.command == "search":
        _print([record.to_dict() for record in service.search_by_prefix(_require_value(args))])
    elif args.command == "list":
        _print([record.to_dict() for record in service.list_all()])
    elif args.command == "delete":
        service.delete(_require_value(args))
    else:
        raise ValueError(f"Unknown command: {args.command}")
    return EXIT_SUCCESS


def run_command(args: argparse.Namespace) -> int:
    if args.command == "check-id":
        valid = checksum_valid(args.kind, _require_value(args))
        _print({"kind": args.kind, "valid": valid})
        return EXIT_SUCCESS if valid else EXIT_REJECTED

    logger = build_logger(args.log_level, Path(args.log_file) if args.log_file else None)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    settings = load_settings(Path(args.config_dir), overlay_config_dir=overlay_config_dir)
    store_path = Path(args.store) if args.store else settings.store_path
    store = JsonFileRecordStore(KIND_BY_NAME[args.kind], store_path)
    service = build_service(args.kind, settings, store, logger=logger)

    try:
        return execute_command(args, service)
    except RecordValidationError as exc:
        _print(exc.errors)
        return EXIT_REJECTED
    except NotFoundError as exc:
        _print({"erro": str(exc)})
        return EXIT_REJECTED
    except AgendaError as exc:
        log_event(logger, str(exc), operation=args.command, kind=args.kind, status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL
    finally:
        if isinstance(service.notifier, HttpNotificationSender):
            service.notifier.close()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except AgendaError:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
