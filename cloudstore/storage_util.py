"""File helpers for stored uploads: reading, writing, compression and URL decoding."""

from __future__ import annotations

import bz2
import lzma
import os
import re
import zlib
from typing import Callable

_HEADER_SIZE = 32
_MAGIC = 0x70

_RAW = 0
_MINIZ = 3
_LZMA20 = 5
_LZMA25 = 10
_BZIP2 = 23

_Codec = tuple[Callable[[bytes], bytes], Callable[[bytes], bytes]]


def _deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(9, zlib.DEFLATED, -15)
    return compressor.compress(data) + compressor.flush()


def _inflate(data: bytes) -> bytes:
    return zlib.decompress(data, -15)


def _lzma_codec(dict_size: int) -> _Codec:
    filters = [{"id": lzma.FILTER_LZMA1, "preset": 6, "dict_size": dict_size}]

    def compress(data: bytes) -> bytes:
        return lzma.compress(data, format=lzma.FORMAT_ALONE, filters=filters)

    def decompress(data: bytes) -> bytes:
        return lzma.decompress(data, format=lzma.FORMAT_ALONE)

    return compress, decompress


_CODECS: dict[int, _Codec] = {
    _RAW: (bytes, bytes),
    _MINIZ: (_deflate, _inflate),
    _LZMA20: _lzma_codec(1 << 20),
    _LZMA25: _lzma_codec(1 << 25),
    _BZIP2: (bz2.compress, bz2.decompress),
}


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _decode_varint(data: bytes, pos: int) -> tuple[int, int]:
    value = 0
    for shift, byte in enumerate(data[pos:pos + 10]):
        value |= (byte & 0x7F) << (7 * shift)
        if not byte & 0x80:
            return value, pos + shift + 1
    raise ValueError("truncated length in compressed header")


def _pack(fmt: int, content: bytes) -> bytes:
    codec = _CODECS.get(fmt)
    if codec is None:
        raise ValueError(f"unsupported compression format {fmt}")
    if not content:
        return b""
    body = codec[0](content)
    header = bytes([_MAGIC, fmt]) + _encode_varint(len(content)) + _encode_varint(len(body))
    return header.rjust(_HEADER_SIZE, b"\0") + body


def _unpack(data: bytes) -> bytes:
    """Decompress packed data; data that is not packed comes back unchanged."""
    prefix = data[:_HEADER_SIZE]
    stripped = prefix.lstrip(b"\0")
    if len(data) < _HEADER_SIZE or not stripped or stripped[0] != _MAGIC:
        return data
    pad = len(prefix) - len(stripped)
    if pad + 2 > len(data):
        return data
    fmt = data[pad + 1]
    size, pos = _decode_varint(data, pad + 2)
    zlen, pos = _decode_varint(data, pos)
    codec = _CODECS.get(fmt)
    if codec is None:
        raise ValueError(f"unsupported compression format {fmt}")
    try:
        out = codec[1](data[pos:pos + zlen])
    except (zlib.error, lzma.LZMAError, OSError, EOFError) as exc:
        raise ValueError(f"corrupt compressed data: {exc}") from exc
    if len(out) != size:
        raise ValueError("decompressed size does not match header")
    return out


_ESCAPE = re.compile(rb"%(.{0,2})", re.DOTALL)
_HEX_PAIR = re.compile(rb"[0-9A-Fa-f]{2}")


def url_decode(text: str) -> str:
    """Decode %XX escapes in a URL path; '+' is left as it is."""

    def replace(match: re.Match) -> bytes:
        digits = match.group(1)
        if not _HEX_PAIR.fullmatch(digits):
            raise ValueError(f"bad percent escape in {text!r}")
        return bytes([int(digits, 16)])

    return _ESCAPE.sub(replace, text.encode("utf-8")).decode("utf-8", errors="replace")


def _as_bytes(data: str | bytes | bytearray) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


class FileUtil:
    """Operations on one file or directory path."""

    def __init__(self, filename: str | os.PathLike) -> None:
        self.filename = os.fspath(filename)

    def size(self) -> int:
        return os.stat(self.filename).st_size

    def last_access_time(self) -> int:
        return int(os.stat(self.filename).st_atime)

    def last_modify_time(self) -> int:
        return int(os.stat(self.filename).st_mtime)

    def file_name(self) -> str:
        """The part of the path after the last '/'."""
        return self.filename.rsplit("/", 1)[-1]

    def read_range(self, pos: int, length: int) -> bytes:
        """Read ``length`` bytes starting at ``pos``."""
        if pos + length > self.size():
            raise ValueError("requested data is larger than the file")
        with open(self.filename, "rb") as handle:
            handle.seek(pos)
            data = handle.read(length)
        if len(data) != length:
            raise OSError(f"short read from {self.filename}")
        return data

    def read(self) -> bytes:
        return self.read_range(0, self.size())

    def write(self, data: str | bytes | bytearray) -> None:
        """Replace the file's content."""
        with open(self.filename, "wb") as handle:
            handle.write(_as_bytes(data))

    def compress(self, content: str | bytes | bytearray, fmt: int) -> None:
        """Compress ``content`` with format ``fmt`` and write it to this file."""
        packed = _pack(fmt, _as_bytes(content))
        if not packed:
            raise ValueError("nothing to compress")
        self.write(packed)

    def uncompress(self, destination: str | os.PathLike) -> None:
        """Decompress this file into ``destination``."""
        FileUtil(destination).write(_unpack(self.read()))

    def exists(self) -> bool:
        return os.path.exists(self.filename)

    def create_directory(self) -> None:
        if not self.exists():
            os.makedirs(self.filename, exist_ok=True)

    def scan_directory(self) -> list[str]:
        """Paths of the non-directory entries in this directory, sorted."""
        paths = []
        with os.scandir(self.filename) as entries:
            for entry in entries:
                if entry.is_dir():
                    continue
                joined = os.path.join(self.filename, entry.name)
                _, rest = os.path.splitdrive(joined)
                paths.append(rest.lstrip("/\\"))
        return sorted(paths)

    def remove(self) -> None:
        if not self.exists():
            raise FileNotFoundError(self.filename)
        if os.path.isdir(self.filename):
            os.rmdir(self.filename)
        else:
            os.remove(self.filename)