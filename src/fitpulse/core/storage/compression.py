"""Gzip helpers for stored record payloads."""

import gzip
import json
from io import BytesIO
from typing import Any


def compress_bytes(data: bytes, compresslevel: int = 6) -> bytes:
    """Gzip-compress binary data."""
    buffer = BytesIO()
    with gzip.GzipFile(fileobj=buffer, mode="wb", compresslevel=compresslevel) as gz:
        gz.write(data)
    return buffer.getvalue()


def decompress_bytes(data: bytes) -> bytes:
    return gzip.decompress(data)


def compress_json(obj: Any, indent: int | None = None) -> bytes:
    """JSON-serialize and gzip-compress an object."""
    json_str = json.dumps(obj, indent=indent, default=str)
    return compress_bytes(json_str.encode("utf-8"))


def decompress_json(data: bytes) -> Any:
    """Decompress and parse JSON data."""
    return json.loads(decompress_bytes(data).decode("utf-8"))
