# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading snapshot documents and schemas."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import cast

from ..types import JSONValue


def load_schema(path: Path) -> Mapping[str, JSONValue]:
    """Load a JSON schema shipped with the package.

    Args:
        path: Filesystem path to the schema file.

    Returns:
        Mapping[str, JSONValue]: Parsed JSON schema mapping.

    Raises:
        FileNotFoundError: If the schema file does not exist.
        ValueError: If the schema is not a JSON object.
    """
    with path.open("r", encoding="utf-8") as stream:
        payload = cast(JSONValue, json.load(stream))
    if not isinstance(payload, Mapping):
        raise ValueError(f"{path}: expected a JSON object")
    return payload


def parse_document(payload: bytes, *, context: str) -> Mapping[str, JSONValue]:
    """Decode raw document bytes into a JSON object.

    Args:
        payload: Raw UTF-8 encoded JSON document.
        context: Human-readable context string used in error messages.

    Returns:
        Mapping[str, JSONValue]: Parsed JSON object.

    Raises:
        ValueError: If the payload is not UTF-8 JSON describing an object.
    """
    try:
        document = cast(JSONValue, json.loads(payload.decode("utf-8")))
    except UnicodeDecodeError as exc:
        raise ValueError(f"{context}: document is not valid UTF-8") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"{context}: failed to parse JSON ({exc.msg} at line {exc.lineno})") from exc
    return _ensure_json_object(document, context=context)


def _ensure_json_object(value: JSONValue, *, context: str) -> Mapping[str, JSONValue]:
    """Ensure ``value`` is a JSON object composed of JSON-compatible structures.

    Args:
        value: Parsed JSON payload to validate.
        context: Human-readable context string used in error messages.

    Returns:
        Mapping[str, JSONValue]: Validated JSON object.

    Raises:
        ValueError: If ``value`` is not a mapping.
    """

    mapping = _ensure_json_value(value, context=context)
    if not isinstance(mapping, Mapping):
        raise ValueError(f"{context}: expected a JSON object")
    return mapping


def _ensure_json_value(value: JSONValue, *, context: str) -> JSONValue:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _ensure_json_value(item, context=f"{context}.{key}") for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_ensure_json_value(item, context=f"{context}[]") for item in value]
    raise ValueError(f"{context}: value is not valid JSON")


__all__ = ["load_schema", "parse_document"]
