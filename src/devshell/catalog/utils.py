# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Utility helpers for validating snapshot document structures."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..errors import IntegrityError
from ..types import JSONValue


def expect_string(value: JSONValue | None, *, key: str, context: str) -> str:
    """Return ``value`` as ``str`` or raise an integrity error.

    Args:
        value: Raw JSON value extracted from the document.
        key: Attribute name used in error messages.
        context: Locator or path identifying the document.

    Returns:
        str: Value as a string.

    Raises:
        IntegrityError: If ``value`` is not a string.
    """
    if not isinstance(value, str):
        raise IntegrityError(context, f"expected '{key}' to be a string")
    return value


def string_array(value: JSONValue | None, *, key: str, context: str) -> tuple[str, ...]:
    """Return ``value`` as a tuple of strings with validation.

    Args:
        value: Raw JSON value extracted from the document.
        key: Attribute name used in error messages.
        context: Locator or path identifying the document.

    Returns:
        tuple[str, ...]: Tuple containing all string entries from ``value``.

    Raises:
        IntegrityError: If ``value`` is not a sequence of strings.
    """
    if value is None:
        return ()
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        raise IntegrityError(context, f"expected '{key}' to be an array of strings")
    result: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise IntegrityError(context, f"expected '{key}[{index}]' to be a string")
        result.append(item)
    return tuple(result)


def expect_mapping(value: JSONValue | None, *, key: str, context: str) -> Mapping[str, JSONValue]:
    """Return ``value`` as a mapping of JSON values or raise an error.

    Args:
        value: Raw JSON value extracted from the document.
        key: Attribute name used in error messages.
        context: Locator or path identifying the document.

    Returns:
        Mapping[str, JSONValue]: Mapping derived from ``value``.

    Raises:
        IntegrityError: If ``value`` is not a mapping.
    """
    if not isinstance(value, Mapping):
        raise IntegrityError(context, f"expected '{key}' to be an object")
    return value


def optional_mapping(value: JSONValue | None, *, key: str, context: str) -> Mapping[str, JSONValue]:
    """Return ``value`` as a mapping, treating a missing value as empty."""

    if value is None:
        return {}
    return expect_mapping(value, key=key, context=context)


__all__ = [
    "expect_mapping",
    "expect_string",
    "optional_mapping",
    "string_array",
]
