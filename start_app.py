# start_app.py
"""Load settings and launch the API server."""

from __future__ import annotations

import argparse
import os
import sys

import uvicorn
from dotenv import load_dotenv

import config


def main(argv: list[str] | None = None) -> None:
    """Load ``.env``, apply command line overrides, then start the API.

    Tables are created by the application on startup.
    """

    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--seed-demo",
        action="store_true",
        help="Insert demo restaurants and accounts on startup",
    )
    parser.add_argument(
        "--sqlite-memory",
        action="store_true",
        help="Use a throwaway in-memory SQLite database",
    )
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    args = parser.parse_args(argv)

    load_dotenv()  # load environment variables from a .env file

    if args.seed_demo:
        os.environ["SEED_DEMO_DATA"] = "true"
    if args.sqlite_memory:
        os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
    config.get_settings.cache_clear()
    settings = config.get_settings()

    try:
        uvicorn.run(
            "api.app.main:app",
            host="0.0.0.0",  # nosec B104: bind for local development
            port=args.port,
            log_level=settings.log_level.lower(),
        )
    except ModuleNotFoundError as exc:
        missing = exc.name or str(exc)
        print(
            f"Missing dependency: {missing}. Install it with 'pip install {missing}'",
            file=sys.stderr,
        )
        raise SystemExit(1)


if __name__ == "__main__":
    main()
