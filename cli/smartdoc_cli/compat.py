from __future__ import annotations

from importlib import metadata


def cli_version() -> str:
    try:
        return metadata.version("smartdoc")
    except metadata.PackageNotFoundError:
        return "0.0.0"
