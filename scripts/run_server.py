#!/usr/bin/env python3
"""
Start the Snap API with uvicorn.
The similarity index is built during startup, so the first boot downloads
and loads the embedding model before the port opens.
"""

import argparse
import sys
from pathlib import Path

# Add the parent directory to sys.path to import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from snap_api.core.config import HOST, PORT, DEBUG


def main():
    parser = argparse.ArgumentParser(description="Run the Snap API server")
    parser.add_argument("--host", default=HOST, help=f"Bind address (default: {HOST})")
    parser.add_argument("--port", type=int, default=PORT, help=f"Port (default: {PORT})")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    args = parser.parse_args()

    print(f"Server running on http://{args.host}:{args.port}")
    uvicorn.run(
        "snap_api.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if DEBUG else "info",
    )


if __name__ == "__main__":
    main()
