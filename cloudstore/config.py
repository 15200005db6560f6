"""Storage server configuration."""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass, fields
from pathlib import Path

CONFIG_FILE = os.environ.get("CLOUDSTORE_CONFIG", "Storage.conf")


@dataclass
class ServerConfig:
    """Settings of the storage server."""

    server_port: int = 8081
    server_ip: str = "127.0.0.1"
    download_prefix: str = "/download/"
    deep_storage_dir: str = "./deep_storage/"
    low_storage_dir: str = "./low_storage/"
    storage_info: str = "./storage.data"
    bundle_format: int = 3
    remove_prefix: str = "/remove/"

    @classmethod
    def from_json(cls, text: str | bytes) -> "ServerConfig":
        """Build a configuration from a JSON object; missing keys keep defaults."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid server configuration: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("server configuration must be a JSON object")
        defaults = cls()
        values = {}
        for field in fields(cls):
            if field.name not in data:
                continue
            convert = type(getattr(defaults, field.name))
            try:
                values[field.name] = convert(data[field.name])
            except (TypeError, ValueError) as exc:
                raise ValueError(f"bad value for {field.name!r}: {data[field.name]!r}") from exc
        return cls(**values)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "ServerConfig":
        """Read a configuration file."""
        return cls.from_json(Path(path).read_bytes())


_config: ServerConfig | None = None
_config_lock = threading.Lock()


def get_config() -> ServerConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    with _config_lock:
        if _config is None:
            try:
                _config = ServerConfig.load(CONFIG_FILE)
            except (OSError, ValueError):
                _config = ServerConfig()
        return _config


def set_config(config: ServerConfig | None) -> None:
    """Replace the process-wide configuration; None reloads it on next use."""
    global _config
    with _config_lock:
        _config = config