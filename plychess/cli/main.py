from __future__ import annotations

import argparse
import logging

import uvicorn

from plychess import config


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the plychess HTTP API")
    parser.add_argument("--host", type=str, default=config.HOST)
    parser.add_argument("--port", type=int, default=config.PORT)
    parser.add_argument("--log-level", type=str, default=config.LOG_LEVEL)
    parser.add_argument("--reload", action="store_true", default=config.RELOAD)
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper())
    uvicorn.run(
        "plychess.protocol.http.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
