"""
Command-line adapter for the prompt manager.

Architectural role:
- Starts the HTTP API server.
- Exposes the join engine for shell use (`join`, `split`) without a database.

Commands:
- `serve [--host] [--port] [--db]`: run the FastAPI app with uvicorn.
- `join --mode MODE TOKEN...`: print the joined prompt.
- `split --mode MODE TEXT`: print one token per line.

Input validation behavior:
- `--mode` is restricted to the known join modes by argparse.

Side effects:
- `serve` opens (and creates) the SQLite database on first request.
- `join`/`split` only write to stdout.
"""

from dotenv import load_dotenv

load_dotenv()

import argparse
import logging
import sys

from prompt_manager.config import DB_PATH, HOST, PORT
from prompt_manager.core.logging_setup import configure_logging
from prompt_manager.prompting.join_engine import JoinMode, build_prompt, split_prompt


logger = logging.getLogger(__name__)

MODE_CHOICES = [mode.value for mode in JoinMode]


# =========================================================
# UTF-8 SAFE STDOUT
# Configures best-effort UTF-8 console output without failing startup.
# =========================================================

if hasattr(sys.stdout, "reconfigure"):
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    except (AttributeError, ValueError):
        pass


# =========================================================
# COMMANDS
# =========================================================

def run_serve(args) -> int:
    import uvicorn

    from prompt_manager.api.http_api import create_app

    logger.info("Serving on %s:%s with database %s", args.host, args.port, args.db)
    uvicorn.run(create_app(args.db), host=args.host, port=args.port)
    return 0


def run_join(args) -> int:
    print(build_prompt(args.tokens, args.mode))
    return 0


def run_split(args) -> int:
    for token in split_prompt(args.text, args.mode):
        print(token)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt-manager",
        description="Assemble image-generation prompts from reusable phrases.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API server")
    serve.add_argument("--host", default=HOST)
    serve.add_argument("--port", type=int, default=PORT)
    serve.add_argument("--db", default=DB_PATH, help="SQLite database path")
    serve.set_defaults(handler=run_serve)

    join = subparsers.add_parser("join", help="Join tokens into one prompt")
    join.add_argument("--mode", choices=MODE_CHOICES, default=JoinMode.SPACE.value)
    join.add_argument("tokens", nargs="*")
    join.set_defaults(handler=run_join)

    split = subparsers.add_parser("split", help="Split a prompt back into tokens")
    split.add_argument("--mode", choices=MODE_CHOICES, default=JoinMode.SPACE.value)
    split.add_argument("text")
    split.set_defaults(handler=run_split)

    return parser


def main(argv=None) -> int:
    """
    Parse arguments and dispatch to the selected command.

    Returns:
        Process exit code.
    """
    configure_logging()
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
