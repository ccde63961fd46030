"""Run the web server for local development.

In production, serve the app with uvicorn directly, for example:

    uvicorn plantwatch.server:app --host 0.0.0.0 --port 5000 --workers 2

Usage: python -m plantwatch.server [--reload]
"""
import argparse

import uvicorn

from plantwatch.lib.config import get_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Plantwatch web server")
    parser.add_argument(
        "--reload", action="store_true", help="Restart on code changes"
    )
    args = parser.parse_args()

    settings = get_settings()
    uvicorn.run(
        "plantwatch.server:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
