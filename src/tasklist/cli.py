"""Command line entry point: run the HTTP server or print the seeded list."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from loguru import logger

from .config import (
    VALID_LOG_LEVELS,
    build_state,
    get_log_level,
    load_config,
    resolve_config_path,
)
from .errors import TaskListError


class _LoguruBridge(logging.Handler):
    """Forward records from the core's stdlib loggers to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(level, "{}: {}", record.name, record.getMessage())


def _configure_logging(level: str = "INFO") -> None:
    """Configure loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan>\n"
            "{message}"
        ),
    )
    core = logging.getLogger("tasklist")
    core.handlers = [_LoguruBridge()]
    core.setLevel(logging.DEBUG)
    core.propagate = False


def _load(args: argparse.Namespace) -> Optional[dict]:
    path = resolve_config_path(args.config)
    config, err = load_config(path)
    if err:
        sys.stderr.write(err + "\n")
        return None
    _configure_logging(args.log_level or get_log_level(config))
    logger.debug("Using config {}", path)
    return config


def _server(args: argparse.Namespace) -> int:
    try:
        import uvicorn
    except ImportError:
        sys.stderr.write("Install server extras: pip install 'tasklist[server]'\n")
        return 1

    from .server import create_app

    config = _load(args)
    if config is None:
        return 1
    try:
        app = create_app(config=config)
    except TaskListError as exc:
        sys.stderr.write(f"Invalid seed data: {exc}\n")
        return 1
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def _export(args: argparse.Namespace) -> int:
    config = _load(args)
    if config is None:
        return 1
    try:
        tasks, _ = build_state(config)
    except TaskListError as exc:
        sys.stderr.write(f"Invalid seed data: {exc}\n")
        return 1
    sys.stdout.write(tasks.dumps(extended=args.extended))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="todo.txt-style task list with presets")
    parser.add_argument("--config", default=None, help="Config file (default: $TASKLIST_CONFIG or ./tasklist.yaml)")
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=sorted(VALID_LOG_LEVELS),
        help="Override the configured log level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    server = subparsers.add_parser("server", help="Serve the task list over HTTP")
    server.add_argument("--host", default="127.0.0.1")
    server.add_argument("--port", default=8000, type=int)
    server.set_defaults(func=_server)

    export = subparsers.add_parser("export", help="Print the seeded task list as todo.txt")
    export.add_argument("--extended", action="store_true", help="Keep projects and completed priorities")
    export.set_defaults(func=_export)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
