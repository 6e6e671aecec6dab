"""Serve the read API with uvicorn: ``python -m webapi``."""

from __future__ import annotations

import argparse
from typing import List

import uvicorn


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Club news read API")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Port (default: 8080)")
    args = parser.parse_args(argv)

    uvicorn.run("webapi.main:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
