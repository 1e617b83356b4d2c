"""
Schemas
File: versioning.py

Purpose: Centralize the persisted record schema version.
This file must stay free of imports from other schema files
to avoid circular dependencies.
"""

from typing import Literal

# Current schema version of persisted tree records
SCHEMA_VERSION: str = "v1"

# Type alias for schema version (future-proof for migrations)
SchemaVersion = Literal["v1"]
