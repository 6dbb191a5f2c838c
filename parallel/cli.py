#!/usr/bin/env python3
"""
Parallel command line.

    parallel serve  [--host H] [--port P] [--data-dir DIR]
    parallel export [-o FILE]
    parallel import FILE
    parallel status

Store commands talk to the remote file store when `remote_url` is
configured and otherwise work on the local cache only.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config
from .errors import BoardValidationError
from .schema import STATUS_ORDER

logger = logging.getLogger("parallel")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [parallel] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def cmd_serve(cfg: Config, args: argparse.Namespace) -> int:
    from .server import create_app

    host = args.host or cfg.host
    port = args.port or cfg.port
    data_dir = args.data_dir or cfg.data_dir
    logger.info(f"Serving board from {Path(data_dir) / 'board.json'} on http://{host}:{port}")
    create_app(data_dir).run(host=host, port=port, debug=False, threaded=True)
    return 0


def cmd_export(cfg: Config, args: argparse.Namespace) -> int:
    store = cfg.build_store()
    store.initialize()
    text = store.export_board()
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        logger.info(f"Board exported to {args.output}")
    else:
        print(text)
    return 0


def cmd_import(cfg: Config, args: argparse.Namespace) -> int:
    try:
        text = Path(args.file).read_text(encoding="utf-8")
    except OSError as e:
        print(f"Cannot read {args.file}: {e}", file=sys.stderr)
        return 1
    store = cfg.build_store()
    store.initialize()
    try:
        board = store.import_json(text)
    except BoardValidationError as e:
        print(f"Import rejected: {e}", file=sys.stderr)
        return 1
    store.close()
    print(f"Imported board {board.id}: {len(board.columns)} columns, {len(board.all_tasks())} tasks")
    return 0


def cmd_status(cfg: Config, args: argparse.Namespace) -> int:
    store = cfg.build_store()
    board = store.initialize()
    print(f"Board {board.id}")
    for col in board.columns:
        print(f"  {col.title}: {len(col.tasks)} tasks")
    counts = store.status_counts()
    print("  " + ", ".join(f"{s.label}: {counts[s]}" for s in STATUS_ORDER))
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="parallel", description="Single-board kanban task tracker")
    ap.add_argument("--config", default=None, help="Path to parallel.yaml")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the board file server")
    serve.add_argument("--host", default=None, help="Bind address (use 0.0.0.0 to expose on network)")
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--data-dir", default=None, help="Directory holding board.json")
    serve.set_defaults(func=cmd_serve)

    export = sub.add_parser("export", help="Print or save the board as JSON")
    export.add_argument("-o", "--output", default=None, help="Write to FILE instead of stdout")
    export.set_defaults(func=cmd_export)

    imp = sub.add_parser("import", help="Replace the board with a JSON export")
    imp.add_argument("file")
    imp.set_defaults(func=cmd_import)

    status = sub.add_parser("status", help="Show column and status counts")
    status.set_defaults(func=cmd_status)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = Config.load(args.config)
    _setup_logging("DEBUG" if args.verbose else cfg.log_level)
    return args.func(cfg, args)


if __name__ == "__main__":
    sys.exit(main())
