"""Records of stored files, kept in memory and persisted as JSON."""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass, replace
from pathlib import Path

from .config import ServerConfig, get_config
from .storage_util import FileUtil


def build_url(file_name: str, config: ServerConfig | None = None) -> str:
    """The download URL path of a stored file."""
    config = config if config is not None else get_config()
    return config.download_prefix + file_name


@dataclass
class StorageInfo:
    """What is known about one stored file."""

    mtime: int = 0
    atime: int = 0
    fsize: int = 0
    storage_path: str = ""
    url: str = ""

    @classmethod
    def from_path(cls, storage_path: str, config: ServerConfig | None = None) -> "StorageInfo":
        """Describe the file stored at ``storage_path``."""
        fu = FileUtil(storage_path)
        if not fu.exists():
            raise FileNotFoundError(storage_path)
        return cls(
            mtime=fu.last_modify_time(),
            atime=fu.last_access_time(),
            fsize=fu.size(),
            storage_path=fu.filename,
            url=build_url(fu.file_name(), config),
        )

    def file_name(self) -> str:
        return self.url.rsplit("/", 1)[-1]

    def remove_path(self, config: ServerConfig | None = None) -> str:
        """The URL path that removes this file."""
        config = config if config is not None else get_config()
        return config.remove_prefix + self.file_name()


class DataManager:
    """Thread-safe table of stored files keyed by URL, saved after each change."""

    def __init__(self, storage_file: str | os.PathLike | None = None) -> None:
        self.storage_file = (
            os.fspath(storage_file) if storage_file is not None else get_config().storage_info
        )
        self._lock = threading.RLock()
        self._table: dict[str, StorageInfo] = {}
        self._persist = False
        self.load()
        self._persist = True

    def load(self) -> None:
        """Read the saved records, if the storage file exists."""
        path = Path(self.storage_file)
        if not path.exists():
            return
        text = path.read_bytes()
        if not text.strip():
            return
        try:
            root = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid storage file {self.storage_file}: {exc}") from exc
        if root is None:
            return
        if not isinstance(root, list):
            raise ValueError(f"storage file {self.storage_file} must hold a JSON array")
        for item in root:
            self.insert(
                StorageInfo(
                    mtime=int(item.get("mtime_", 0)),
                    atime=int(item.get("atime_", 0)),
                    fsize=int(item.get("fsize_", 0)),
                    storage_path=str(item.get("storage_path_", "")),
                    url=str(item.get("url_", "")),
                )
            )

    def save(self) -> None:
        """Write all records to the storage file."""
        items = [
            {
                "atime_": info.atime,
                "fsize_": info.fsize,
                "mtime_": info.mtime,
                "storage_path_": info.storage_path,
                "url_": info.url,
            }
            for info in self.all()
        ]
        body = json.dumps(items, ensure_ascii=False, indent="\t", sort_keys=True)
        FileUtil(self.storage_file).write(body)

    def insert(self, info: StorageInfo) -> None:
        with self._lock:
            self._table[info.url] = replace(info)
            if self._persist:
                self.save()

    def update(self, info: StorageInfo) -> None:
        with self._lock:
            self._table[info.url] = replace(info)
            self.save()

    def get_by_url(self, url: str) -> StorageInfo | None:
        with self._lock:
            info = self._table.get(url)
            return replace(info) if info is not None else None

    def get_by_storage_path(self, storage_path: str) -> StorageInfo | None:
        with self._lock:
            for info in self._table.values():
                if info.storage_path == storage_path:
                    return replace(info)
        return None

    def all(self) -> list[StorageInfo]:
        with self._lock:
            return [replace(info) for info in self._table.values()]

    def remove(self, url: str) -> bool:
        """Forget the record for ``url``; return whether there was one."""
        with self._lock:
            if self._table.pop(url, None) is None:
                return False
            self.save()
            return True