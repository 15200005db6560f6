"""Base64 encoding with standard and URL alphabets, and a liberal decoder."""

from __future__ import annotations

import base64

_STANDARD_TO_URL = str.maketrans("+/=", "-_.")
_PADDING = ("=", ".")


def _as_bytes(data: str | bytes | bytearray) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def encode(data: str | bytes | bytearray, url: bool = False) -> str:
    """Encode to base64; the URL alphabet uses '-', '_' and '.' as padding."""
    encoded = base64.b64encode(_as_bytes(data)).decode("ascii")
    return encoded.translate(_STANDARD_TO_URL) if url else encoded


def _insert_linebreaks(text: str, distance: int) -> str:
    return "\n".join(text[start:start + distance] for start in range(0, len(text), distance))


def encode_pem(data: str | bytes | bytearray) -> str:
    """Encode with a line break after every 64 characters."""
    return _insert_linebreaks(encode(data), 64)


def encode_mime(data: str | bytes | bytearray) -> str:
    """Encode with a line break after every 76 characters."""
    return _insert_linebreaks(encode(data), 76)


def _position(char: str) -> int:
    if "A" <= char <= "Z":
        return ord(char) - ord("A")
    if "a" <= char <= "z":
        return ord(char) - ord("a") + 26
    if "0" <= char <= "9":
        return ord(char) - ord("0") + 52
    if char in "+-":
        return 62
    if char in "/_":
        return 63
    raise ValueError("Input is not valid base64-encoded data.")


def decode(encoded: str | bytes | bytearray, remove_linebreaks: bool = False) -> bytes:
    """Decode base64 in either alphabet; padding is optional."""
    text = encoded.decode("ascii", errors="replace") if isinstance(encoded, (bytes, bytearray)) else encoded
    if remove_linebreaks:
        text = text.replace("\n", "")
    out = bytearray()
    length = len(text)
    for pos in range(0, length, 4):
        if pos + 1 >= length:
            raise ValueError("Input is not valid base64-encoded data.")
        first = _position(text[pos])
        second = _position(text[pos + 1])
        out.append(((first << 2) + ((second & 0x30) >> 4)) & 0xFF)
        if pos + 2 < length and text[pos + 2] not in _PADDING:
            third = _position(text[pos + 2])
            out.append((((second & 0x0F) << 4) + ((third & 0x3C) >> 2)) & 0xFF)
            if pos + 3 < length and text[pos + 3] not in _PADDING:
                out.append((((third & 0x03) << 6) + _position(text[pos + 3])) & 0xFF)
    return bytes(out)