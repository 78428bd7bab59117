"""
ghrelease — Content-type sniffer for release assets.

Magic-number table over the first bytes of the file, plus a small text
heuristic for JSON / XML. Returns None when nothing matches; the caller
decides the fallback.
"""

from __future__ import annotations

import codecs
from pathlib import Path

SNIFF_BYTES = 512

# (offset, magic, media type), checked in order; first match wins.
SIGNATURES: list[tuple[int, bytes, str]] = [
    (0, b"PK\x03\x04", "application/zip"),
    (0, b"PK\x05\x06", "application/zip"),  # empty archive
    (0, b"\x1f\x8b", "application/gzip"),
    (0, b"BZh", "application/x-bzip2"),
    (0, b"\xfd7zXZ\x00", "application/x-xz"),
    (0, b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
    (0, b"\x28\xb5\x2f\xfd", "application/zstd"),
    (0, b"Rar!\x1a\x07", "application/vnd.rar"),
    (257, b"ustar", "application/x-tar"),
    (0, b"%PDF", "application/pdf"),
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"\x7fELF", "application/x-elf"),
    (0, b"\xcf\xfa\xed\xfe", "application/x-mach-binary"),
    (0, b"\xce\xfa\xed\xfe", "application/x-mach-binary"),
    (0, b"\xca\xfe\xba\xbe", "application/java-vm"),  # also fat Mach-O; class files dominate releases
    (0, b"MZ", "application/vnd.microsoft.portable-executable"),
    (0, b"\x00asm", "application/wasm"),
    (0, b"!<arch>\ndebian", "application/vnd.debian.binary-package"),
    (0, b"!<arch>", "application/x-archive"),
    (0, b"\xed\xab\xee\xdb", "application/x-rpm"),
    (0, b"SQLite format 3\x00", "application/vnd.sqlite3"),
    (0, b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", "application/x-ole-storage"),
]

# Containers whose RIFF sub-type lives at offset 8
RIFF_TYPES = {
    b"WEBP": "image/webp",
    b"WAVE": "audio/wav",
    b"AVI ": "video/x-msvideo",
}


def _sniff_text(head: bytes) -> str | None:
    # a full sample may end inside a multi-byte sequence
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        text = decoder.decode(head, final=len(head) < SNIFF_BYTES)
    except UnicodeDecodeError:
        return None
    stripped = text.lstrip("\ufeff \t\r\n")
    if not stripped:
        return None
    if stripped.startswith("<?xml"):
        return "application/xml"
    if stripped[0] in "{[":
        return "application/json"
    if "\x00" in text:
        return None
    return "text/plain"


def sniff_bytes(head: bytes) -> str | None:
    """Guess a media type from the leading bytes of a file."""
    if not head:
        return None
    for offset, magic, media_type in SIGNATURES:
        if head[offset:offset + len(magic)] == magic:
            return media_type
    if head[:4] == b"RIFF" and head[8:12] in RIFF_TYPES:
        return RIFF_TYPES[head[8:12]]
    return _sniff_text(head)


def sniff_file(path: str | Path) -> str | None:
    """Read the first bytes of `path` and sniff them."""
    with open(path, "rb") as fh:
        return sniff_bytes(fh.read(SNIFF_BYTES))
