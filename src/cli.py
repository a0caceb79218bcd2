"""Command-line interface for autolens."""

from __future__ import annotations

import argparse
import sys
import threading
from pathlib import Path

import orjson

from common.logger import get_logger, setup_logging
from config import AutolensConfig, ConfigError, load_config
from parse.treesitter_calls import ParseError, extract_compiler_calls
from resolve.resolver import analyze
from scan.files import find_source_files
from store.discovery import MultipleStoresError, StoreNotFoundError, find_disk_path
from store.disk import StoreError, empty_disk, read_disk
from store.listener import StoreListener
from store.models import Disk

logger = get_logger(__name__)


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Workspace root (default: .)",
    )
    parser.add_argument(
        "--store",
        default=None,
        help="Snapshot store path (default: discover .functions/cache.json)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="autolens")
    subparsers = parser.add_subparsers(dest="command", required=True)

    calls_parser = subparsers.add_parser(
        "calls", help="List compiler call sites in a source file"
    )
    calls_parser.add_argument("file", help="TS/JS source file")

    scan_parser = subparsers.add_parser(
        "scan", help="Resolve every compiler call against the snapshot store"
    )
    _add_common_paths(scan_parser)

    watch_parser = subparsers.add_parser(
        "watch", help="Re-scan whenever the snapshot store changes"
    )
    _add_common_paths(watch_parser)

    return parser


def _write_json_line(record: dict[str, object]) -> None:
    sys.stdout.write(orjson.dumps(record).decode("utf-8") + "\n")


def _resolve_store_path(
    root: Path, config: AutolensConfig, store: str | None
) -> Path | None:
    if store is not None:
        return Path(store).expanduser().resolve()
    return config.resolve_store_path(root)


def _load_disk(root: Path, store_path: Path | None) -> Disk:
    """Read the store once for a one-shot scan.

    Raises:
        StoreError: If an explicit store cannot be read.
        MultipleStoresError: If discovery finds more than one store.
    """
    if store_path is None:
        try:
            store_path = find_disk_path(root)
        except StoreNotFoundError as exc:
            logger.warning("%s; every call will show as pending", exc)
            return empty_disk()
    return read_disk(store_path)


def _scan_records(
    root: Path, config: AutolensConfig, disk: Disk
) -> list[dict[str, object]]:
    records: list[dict[str, object]] = []
    for file_path in find_source_files(
        root,
        extensions=config.extensions,
        include_patterns=config.include,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    ):
        relative_path = file_path.relative_to(root).as_posix()
        try:
            text = file_path.read_text(encoding="utf-8")
            decisions = analyze(text, disk)
        except (OSError, UnicodeDecodeError) as exc:
            sys.stderr.write(f"{relative_path}: read error: {exc}\n")
            continue
        except ParseError as exc:
            sys.stderr.write(f"{relative_path}: parse error: {exc}\n")
            continue

        records.extend(
            {"path": relative_path, **decision.to_dict()} for decision in decisions
        )
    return records


def _handle_calls(file: str) -> int:
    file_path = Path(file).expanduser()
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    try:
        calls = extract_compiler_calls(text)
    except ParseError as exc:
        sys.stderr.write(f"{file_path}: parse error: {exc}\n")
        return 1

    for call in calls:
        _write_json_line(call.to_dict())
    return 0


def _handle_scan(root: Path, config: AutolensConfig, store: str | None) -> int:
    try:
        disk = _load_disk(root, _resolve_store_path(root, config, store))
    except (StoreError, MultipleStoresError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    for record in _scan_records(root, config, disk):
        _write_json_line(record)
    return 0


def _handle_watch(root: Path, config: AutolensConfig, store: str | None) -> int:
    def on_update(disk: Disk) -> None:
        logger.info("Snapshot store updated (%d entries)", len(disk.data))
        for record in _scan_records(root, config, disk):
            _write_json_line(record)
        sys.stdout.flush()

    def on_error(message: str) -> None:
        sys.stderr.write(f"error: {message}\n")

    listener = StoreListener(
        root,
        on_update,
        on_error=on_error,
        store_path=_resolve_store_path(root, config, store),
        poll_interval=config.poll_interval,
    )
    listener.start()
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        listener.stop()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "calls":
        setup_logging()
        return _handle_calls(args.file)

    root = Path(args.root).expanduser().resolve()
    try:
        config = load_config(root)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    setup_logging(config.log_level)

    if args.command == "scan":
        return _handle_scan(root, config, args.store)

    if args.command == "watch":
        return _handle_watch(root, config, args.store)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
