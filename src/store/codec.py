"""YAML codec helpers for settings and record files.

This module is the only place that touches PyYAML and converts its
failures into fsdb errors. Read failures distinguish unreadable files
(FsdbStoreError) from corrupt content (FsdbDecodeError).
"""

from __future__ import annotations

import os
from pathlib import Path
import tempfile

import yaml

from core.errors import FsdbDecodeError, FsdbStoreError


def encode(payload: object, pretty: bool = True) -> str:
    """Encode one structured value as YAML text.

    Args:
        payload: Mapping, sequence, scalar, or datetime value.
        pretty: Block style when true, single flow-style document otherwise.

    Returns:
        YAML document text.
    """
    return yaml.safe_dump(
        payload,
        default_flow_style=not pretty,
        sort_keys=False,
        allow_unicode=True,
    )


def decode(text: str, source: Path | str = "<string>") -> object:
    """Decode one YAML document.

    Args:
        text: YAML document text.
        source: Origin used in error messages.

    Returns:
        Decoded value.

    Raises:
        FsdbDecodeError: If the text is not valid YAML.
    """
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as error:
        raise FsdbDecodeError(
            f"Failed to parse YAML at {source}: {error}. "
            "Fix or delete the corrupt file."
        ) from error


def read_yaml_file(payload_path: Path) -> object:
    """Read and decode one YAML file.

    Raises:
        FsdbStoreError: If the file cannot be read.
        FsdbDecodeError: If the file content is not valid YAML.
    """
    try:
        text = payload_path.read_text(encoding="utf-8")
    except OSError as error:
        raise FsdbStoreError(f"Failed to read {payload_path}: {error}.") from error
    return decode(text, payload_path)


def write_yaml_file(
    payload_path: Path,
    payload: object,
    pretty: bool = True,
    exclusive: bool = False,
) -> None:
    """Encode and write one YAML file with a whole-file overwrite.

    Args:
        payload_path: Destination path.
        payload: Value to encode.
        pretty: Whether to write block-style YAML.
        exclusive: Fail with FileExistsError if the destination exists.

    Raises:
        FileExistsError: If exclusive is set and the file already exists.
        FsdbStoreError: For any other write failure.
    """
    text = encode(payload, pretty=pretty)
    mode = "x" if exclusive else "w"
    try:
        with payload_path.open(mode, encoding="utf-8") as payload_file:
            payload_file.write(text)
    except FileExistsError:
        raise
    except OSError as error:
        raise FsdbStoreError(f"Failed to write {payload_path}: {error}.") from error


def write_yaml_file_atomic(
    payload_path: Path,
    payload: object,
    pretty: bool = True,
    temp_prefix: str = ".tmp-",
) -> None:
    """Write one YAML file so readers see either old or new content.

    Content goes to a temp file in the destination directory, is fsynced,
    then moved over the destination with os.replace.

    Raises:
        FsdbStoreError: If any step fails; the destination is left untouched.
    """
    text = encode(payload, pretty=pretty)
    temp_name: str | None = None
    try:
        file_descriptor, temp_name = tempfile.mkstemp(
            dir=payload_path.parent, prefix=temp_prefix, suffix=".yaml"
        )
        with os.fdopen(file_descriptor, "w", encoding="utf-8") as temp_file:
            temp_file.write(text)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_name, payload_path)
    except OSError as error:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)
        raise FsdbStoreError(
            f"Failed to write {payload_path}: {error}. Previous content was kept."
        ) from error
