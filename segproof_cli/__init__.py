"""
Segproof CLI

Command-line interface for the segment proof store.

Usage:
    python -m segproof_cli upload report.pdf ./part-000
    python -m segproof_cli proof report.pdf 0 --out proof.json
    python -m segproof_cli verify proof.json
    python -m segproof_cli list
    python -m segproof_cli serve --port 8080
"""

__version__ = "0.1.0"
