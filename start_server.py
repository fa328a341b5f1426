#!/usr/bin/env python3
"""Run the API with uvicorn on the port given by ``PORT`` (default 8000)."""

import os
import sys

import uvicorn

SRC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")


def _port() -> int:
    raw = os.environ.get("PORT", "8000")
    try:
        return int(raw)
    except ValueError:
        print(f"Warning: Invalid PORT value '{raw}', using default 8000", file=sys.stderr)
        return 8000


def main() -> None:
    if SRC_DIR not in sys.path:
        sys.path.insert(0, SRC_DIR)
    port = _port()
    print(f"Starting server on port {port}...", file=sys.stderr)
    uvicorn.run(
        "crp_tools.main:app",
        host="0.0.0.0",
        port=port,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
