#!/usr/bin/env python3
"""Fetch a Friend: Single entry point.

Launches the FastAPI search and favorites API in front of the Fetch
dogs service.

Usage:
    python main.py
    python main.py --port 8000
    python main.py --api-url https://frontend-take-home-service.fetch.com
"""

from __future__ import annotations

import argparse
import logging
import os

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger("fetch-a-friend")


def main() -> None:
    """Parse arguments and serve the API with uvicorn."""
    parser = argparse.ArgumentParser(
        description="Fetch a Friend dog search API"
    )
    parser.add_argument(
        "--port", type=int, default=None, help="Server port"
    )
    parser.add_argument(
        "--host", type=str, default=None, help="Server host"
    )
    parser.add_argument(
        "--api-url", type=str, default=None, help="Upstream dogs API URL"
    )
    args = parser.parse_args()

    # Config reads the environment, so the override must land before it loads
    if args.api_url:
        os.environ["FETCH_API_URL"] = args.api_url

    from src.config import get_config

    config = get_config()
    host = args.host or config.host
    port = args.port or config.port

    logger.info("Upstream dogs API: %s", config.api_url)
    logger.info("Launching API on %s:%d", host, port)
    import uvicorn

    from src.api.app import create_app

    app = create_app()

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
