from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Iterable, Union

import httpx

DEFAULT_CONTENT_TYPE = "application/octet-stream"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ACCEPTED_SUFFIXES = (".pdf", ".docx", ".doc", ".txt")

FileInput = Union[str, os.PathLike, IO[bytes], "FilePart"]


class UploadRejected(ValueError):
    """File failed a pre-upload check."""


@dataclass(frozen=True)
class JsonBody:
    value: Any


@dataclass(frozen=True)
class FilePart:
    filename: str
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_bytes(cls, filename: str, content: bytes, content_type: str | None = None) -> "FilePart":
        return cls(filename=filename, content=bytes(content), content_type=content_type or guess_type(filename))

    @classmethod
    def from_input(cls, value: FileInput) -> "FilePart":
        if isinstance(value, FilePart):
            return value
        if isinstance(value, (str, os.PathLike)):
            path = Path(value)
            return cls.from_bytes(path.name, path.read_bytes())
        if hasattr(value, "read"):
            name = os.path.basename(str(getattr(value, "name", "") or "upload"))
            data = value.read()
            if isinstance(data, str):
                data = data.encode("utf-8")
            return cls.from_bytes(name, data)
        raise TypeError(f"unsupported file input: {type(value).__name__}")


@dataclass(frozen=True)
class MultipartBody:
    files: tuple[tuple[str, FilePart], ...]
    fields: dict[str, str] = field(default_factory=dict)

    def httpx_files(self) -> list[tuple[str, tuple[str, bytes, str]]]:
        return [(name, (part.filename, part.content, part.content_type)) for name, part in self.files]


def guess_type(filename: str) -> str:
    return mimetypes.guess_type(filename)[0] or DEFAULT_CONTENT_TYPE


def build_multipart(
        files: Iterable[tuple[str, FileInput]],
        fields: dict[str, Any] | None = None,
) -> MultipartBody:
    """Package file inputs (plus string form fields) into a multipart body.

    The boundary, and therefore the Content-Type header, is left to the
    transport.
    """
    parts = tuple((name, FilePart.from_input(value)) for name, value in files)
    if not parts:
        raise ValueError("multipart body needs at least one file")
    str_fields = {k: str(v) for k, v in (fields or {}).items() if v is not None}
    return MultipartBody(files=parts, fields=str_fields)


def check_upload(
        part: FilePart,
        *,
        max_bytes: int = MAX_UPLOAD_BYTES,
        accepted_suffixes: Iterable[str] = ACCEPTED_SUFFIXES,
) -> None:
    if part.size > max_bytes:
        raise UploadRejected(f"File size must be less than {max_bytes // (1024 * 1024)}MB")
    suffixes = tuple(s.lower() for s in accepted_suffixes)
    suffix = Path(part.filename).suffix.lower()
    if suffix not in suffixes:
        raise UploadRejected(f"File type must be one of: {', '.join(suffixes)}")


def decode_response(response: httpx.Response, kind: str) -> Any:
    if kind == "binary":
        return response.content
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
