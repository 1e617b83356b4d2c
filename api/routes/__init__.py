"""API route handlers."""

from api.routes import health, upload, download, delete, proof, files

__all__ = ["health", "upload", "download", "delete", "proof", "files"]
