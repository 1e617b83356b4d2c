"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m segproof_cli upload <file_name> <path> [--segment-name NAME] [--json]
    python -m segproof_cli proof <file_name> <segment_index> [--no-verify] [--out PATH] [--json]
    python -m segproof_cli verify <proof_path> [--root 0x..] [--segment PATH] [--json]
    python -m segproof_cli root <file_name>
    python -m segproof_cli list [<file_name>] [--json]
    python -m segproof_cli download <file_name> <segment_name> --out PATH
    python -m segproof_cli delete <file_name>
    python -m segproof_cli serve [--host HOST] [--port PORT]
    python -m segproof_cli config --init

Environment Variables:
    SEGPROOF_UPLOADS_DIR        Root directory for stored segments (default: uploads)
    SEGPROOF_MAX_UPLOAD_SIZE    Maximum segment size in bytes (default: 10 MiB)
    SEGPROOF_TREE_FILE_NAME     Per-file tree record name (default: merkleTree.json)
    SEGPROOF_VERIFY_PROOFS      Self-check proofs before returning them (default: true)
    SEGPROOF_LOG_LEVEL          Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config.runtime import get_default_config_template, load_runtime_config
from core.schemas.errors import MerkleVerificationException, SegproofException
from core.storage.segment_store import SegmentStore
from segproof_cli import __version__
from segproof_cli.commands import files, proof, serve, upload, verify


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="segproof",
        description="Segproof CLI - Store file segments and prove their membership with Merkle proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./segproof.json or ~/.config/segproof/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- upload command ---
    upload_parser = subparsers.add_parser(
        "upload",
        help="Store a segment of a file",
        description="Store a local file as the next segment of a logical file and extend its Merkle tree.",
    )
    upload_parser.add_argument("file_name", type=str, help="Logical file name")
    upload_parser.add_argument("path", type=str, help="Local path of the segment bytes")
    upload_parser.add_argument(
        "--segment-name",
        type=str,
        default=None,
        help="Segment name (default: basename of path)",
    )
    upload_parser.add_argument("--json", action="store_true", help="JSON output")
    upload_parser.set_defaults(func=upload.upload_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Generate a membership proof",
        description="Generate a Merkle proof for the segment at a leaf index.",
    )
    proof_parser.add_argument("file_name", type=str, help="Logical file name")
    proof_parser.add_argument("segment_index", type=str, help="Leaf index (upload order, from 0)")
    proof_parser.add_argument(
        "--no-verify",
        action="store_true",
        default=False,
        help="Skip the self-check of the generated proof",
    )
    proof_parser.add_argument("--out", "-o", type=str, help="Write the proof document to PATH")
    proof_parser.add_argument("--json", action="store_true", help="JSON output")
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof document",
        description="Check a proof document against a trusted root. Exit code 2 on mismatch.",
    )
    verify_parser.add_argument("proof_path", type=str, help="Path to a proof document")
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Trusted root as 0x-hex (default: root stored in the document)",
    )
    verify_parser.add_argument(
        "--segment",
        type=str,
        default=None,
        help="Also check that this local file is the proven leaf",
    )
    verify_parser.add_argument("--json", action="store_true", help="JSON output")
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Print a file's Merkle root",
    )
    root_parser.add_argument("file_name", type=str, help="Logical file name")
    root_parser.set_defaults(func=proof.root_cmd)

    # --- list command ---
    list_parser = subparsers.add_parser(
        "list",
        help="List files or segments",
        description="List stored files, or the segments of one file.",
    )
    list_parser.add_argument("file_name", type=str, nargs="?", default=None, help="Logical file name")
    list_parser.add_argument("--json", action="store_true", help="JSON output")
    list_parser.set_defaults(func=files.list_cmd)

    # --- download command ---
    download_parser = subparsers.add_parser(
        "download",
        help="Copy a stored segment to a local path",
    )
    download_parser.add_argument("file_name", type=str, help="Logical file name")
    download_parser.add_argument("segment_name", type=str, help="Segment name")
    download_parser.add_argument("--out", "-o", type=str, required=True, help="Output path")
    download_parser.add_argument("--force", action="store_true", help="Overwrite an existing output")
    download_parser.set_defaults(func=files.download_cmd)

    # --- delete command ---
    delete_parser = subparsers.add_parser(
        "delete",
        help="Delete a file and all its segments",
    )
    delete_parser.add_argument("file_name", type=str, help="Logical file name")
    delete_parser.set_defaults(func=files.delete_cmd)

    # --- serve command ---
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API",
    )
    serve_parser.add_argument("--host", type=str, default=None, help="Bind host (overrides config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (overrides config)")
    serve_parser.set_defaults(func=serve.serve_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="segproof.json",
        help="Path for config file (default: segproof.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (SEGPROOF_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: segproof config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_runtime_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config and store to args for commands to use
    args.runtime_config = config
    args.store = SegmentStore(config.storage)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleVerificationException as e:
        print(f"Verification failed: {e.message}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED
    except SegproofException as e:
        if args.debug:
            traceback.print_exc()
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
