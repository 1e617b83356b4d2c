"""
CLI command modules.
"""

from segproof_cli.commands import upload, proof, verify, files, serve

__all__ = ["upload", "proof", "verify", "files", "serve"]
