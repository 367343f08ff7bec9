# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Checksum utilities for snapshot documents."""

from __future__ import annotations

import hashlib
from typing import Final

CHECKSUM_PREFIX: Final[str] = "sha256-"


def compute_checksum(payload: bytes) -> str:
    """Calculate the checksum recorded for a snapshot document.

    Args:
        payload: Raw document bytes exactly as read from disk.

    Returns:
        str: ``sha256-`` prefixed hex digest of ``payload``.
    """
    return f"{CHECKSUM_PREFIX}{hashlib.sha256(payload).hexdigest()}"


__all__ = ["CHECKSUM_PREFIX", "compute_checksum"]
