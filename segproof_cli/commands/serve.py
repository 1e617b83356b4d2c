"""
CLI Serve Command

Run the HTTP API with uvicorn.

Usage:
    segproof serve [--host HOST] [--port PORT]
"""

from __future__ import annotations

import copy
from argparse import Namespace


EXIT_SUCCESS = 0


def serve_cmd(args: Namespace) -> int:
    """Start the API server (blocks until interrupted)."""
    from api.app import run_server

    config = copy.deepcopy(args.runtime_config)
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port

    run_server(config)
    return EXIT_SUCCESS
