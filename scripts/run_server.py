#!/usr/bin/env python3
"""Start the zpages server: /healthz, /readyz and /support/* endpoints.

Usage:
  python scripts/run_server.py [--config PATH] [--port PORT]
  --config   Config file (default: $ZPAGES_CONFIG or config/config.yaml; packaged defaults when absent)
  --port     Override server.port

LOGLEVEL, LOGAS and DEBUGLEVEL override the logging section at startup.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))
os.chdir(_PROJECT_ROOT)


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the zpages health/readiness/support server.")
    parser.add_argument("--config", default=None, help="Config path")
    parser.add_argument("--port", type=int, default=None, help="Override server.port")
    args = parser.parse_args()

    from zpages.config.settings import read_config
    from zpages.server.app import run_server

    config, resolved = read_config(args.config)
    if args.config and resolved is None:
        print(f"Config not found: {args.config}", file=sys.stderr)
        return 1
    if args.port is not None:
        config.setdefault("server", {})["port"] = args.port
    run_server(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
