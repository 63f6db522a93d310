"""Data URI parsing for image and email payloads."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from phish_content_analyzer.core.errors import MalformedPayloadError

_PREFIX = "data:"
_BASE64_MARKER = ";base64,"


@dataclass(frozen=True)
class DataUriPayload:
    mime_type: str
    data: bytes


def parse_data_uri(raw: str, *, label: str = "payload") -> DataUriPayload:
    """Decode a `data:<mime-type>;base64,<data>` string.

    Raises `MalformedPayloadError` when the markers are missing, the data part
    is empty, or the base64 text cannot be decoded.
    """

    value = (raw or "").strip()
    if not value.startswith(_PREFIX) or _BASE64_MARKER not in value:
        raise MalformedPayloadError(f"Invalid data URI format for the {label}.")
    header, encoded = value[len(_PREFIX) :].split(_BASE64_MARKER, maxsplit=1)
    encoded = "".join(encoded.split())
    if not encoded:
        raise MalformedPayloadError(f"No base64 data found in the {label} data URI.")
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedPayloadError(f"Base64 data of the {label} could not be decoded.") from exc
    mime_type = header.split(";", maxsplit=1)[0].strip().lower() or "application/octet-stream"
    return DataUriPayload(mime_type=mime_type, data=data)


def build_data_uri(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"{_PREFIX}{mime_type}{_BASE64_MARKER}{encoded}"
