"""Entry point for running tic-tac-toe via ``python -m tictactoe``."""

from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise argparse.ArgumentTypeError(
            f"invalid log level {value!r} (choose from {', '.join(LOG_LEVELS)})"
        )
    return level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tictactoe", description="Tic-tac-toe against a perfect opponent"
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=("console", "serve"),
        default="console",
        help="play in the terminal (default) or start the web server",
    )
    parser.add_argument(
        "--host", default=os.environ.get("TICTACTOE_HOST", "127.0.0.1")
    )
    parser.add_argument(
        "--port", type=int, default=int(os.environ.get("TICTACTOE_PORT", "8000"))
    )
    parser.add_argument(
        "--log-level",
        type=_log_level,
        default=os.environ.get("TICTACTOE_LOG_LEVEL", "WARNING"),
        help="logging level, e.g. DEBUG to trace the search",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Play in the terminal or start the FastAPI-powered web server."""

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        import uvicorn

        uvicorn.run("tictactoe.ui:app", host=args.host, port=args.port, reload=False)
        return 0

    from .console import main as console_main

    return console_main()


if __name__ == "__main__":
    raise SystemExit(main())
