"""
Runtime Configuration

Central configuration for segment storage, the HTTP server and logging.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "SEGPROOF_"

DEFAULT_UPLOADS_DIR = "uploads"
DEFAULT_MAX_UPLOAD_SIZE = 10 << 20  # 10 MiB
DEFAULT_TREE_FILE_NAME = "merkleTree.json"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class StorageConfig:
    """Configuration for on-disk segment storage."""
    uploads_dir: str = DEFAULT_UPLOADS_DIR
    max_upload_size: int = DEFAULT_MAX_UPLOAD_SIZE
    tree_file_name: str = DEFAULT_TREE_FILE_NAME
    verify_proofs: bool = True

    @property
    def uploads_path(self) -> Path:
        return Path(self.uploads_dir)


@dataclass
class ServerConfig:
    """Configuration for the HTTP server."""
    host: str = "0.0.0.0"
    port: int = 8080


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the segment store.

    Can be loaded from:
    - Environment variables
    - YAML or JSON file
    - Programmatic construction
    """
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - SEGPROOF_UPLOADS_DIR: Root directory for uploaded segments
        - SEGPROOF_MAX_UPLOAD_SIZE: Maximum segment size in bytes
        - SEGPROOF_TREE_FILE_NAME: Name of the per-file tree record
        - SEGPROOF_VERIFY_PROOFS: Self-check proofs before returning them (true/false)
        - SEGPROOF_HOST / SEGPROOF_PORT: HTTP bind address
        - SEGPROOF_LOG_LEVEL / SEGPROOF_LOG_FILE: Logging
        """
        overrides: dict[str, Any] = {}

        # Storage settings
        if os.getenv(f"{ENV_PREFIX}UPLOADS_DIR"):
            overrides.setdefault("storage", {})["uploads_dir"] = os.getenv(f"{ENV_PREFIX}UPLOADS_DIR")
        if os.getenv(f"{ENV_PREFIX}MAX_UPLOAD_SIZE"):
            overrides.setdefault("storage", {})["max_upload_size"] = int(
                os.getenv(f"{ENV_PREFIX}MAX_UPLOAD_SIZE", str(DEFAULT_MAX_UPLOAD_SIZE))
            )
        if os.getenv(f"{ENV_PREFIX}TREE_FILE_NAME"):
            overrides.setdefault("storage", {})["tree_file_name"] = os.getenv(f"{ENV_PREFIX}TREE_FILE_NAME")
        if os.getenv(f"{ENV_PREFIX}VERIFY_PROOFS"):
            overrides.setdefault("storage", {})["verify_proofs"] = _env_bool(
                os.getenv(f"{ENV_PREFIX}VERIFY_PROOFS", "true")
            )

        # Server settings
        if os.getenv(f"{ENV_PREFIX}HOST"):
            overrides.setdefault("server", {})["host"] = os.getenv(f"{ENV_PREFIX}HOST")
        if os.getenv(f"{ENV_PREFIX}PORT"):
            overrides.setdefault("server", {})["port"] = int(os.getenv(f"{ENV_PREFIX}PORT", "8080"))

        # Logging
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML (.yaml/.yml) or JSON file."""
        path = Path(path)
        if path.suffix.lower() in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        storage_data = data.get("storage", {})
        server_data = data.get("server", {})

        storage = StorageConfig(**storage_data) if storage_data else StorageConfig()
        server = ServerConfig(**server_data) if server_data else ServerConfig()

        return cls(
            storage=storage,
            server=server,
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "storage" in overrides:
            for key, value in overrides["storage"].items():
                setattr(new_config.storage, key, value)

        if "server" in overrides:
            for key, value in overrides["server"].items():
                setattr(new_config.server, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "storage": {
                "uploads_dir": self.storage.uploads_dir,
                "max_upload_size": self.storage.max_upload_size,
                "tree_file_name": self.storage.tree_file_name,
                "verify_proofs": self.storage.verify_proofs,
            },
            "server": {
                "host": self.server.host,
                "port": self.server.port,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


def config_search_paths() -> list[Path]:
    """Config files looked up when no explicit path is given, in order."""
    return [
        Path.cwd() / "segproof.json",
        Path.cwd() / ".segproof.json",
        Path.home() / ".config" / "segproof" / "config.json",
    ]


def load_runtime_config(config_path: str | Path | None = None) -> RuntimeConfig:
    """
    Load configuration from a file, then overlay environment variables.

    With no explicit path the first existing entry of config_search_paths()
    is used; with none present the defaults apply. Environment variables
    ALWAYS override file values.
    """
    if config_path is not None:
        return RuntimeConfig.from_file(config_path).with_env_overrides()

    for path in config_search_paths():
        if path.exists():
            return RuntimeConfig.from_file(path).with_env_overrides()

    return RuntimeConfig().with_env_overrides()


def get_default_config_template() -> str:
    """JSON text written by `segproof config --init`."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = load_runtime_config()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
