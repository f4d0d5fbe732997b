# Copyright (c) KeyMesh Contributors. All rights reserved.
# Licensed under the MIT License.
"""Centralized exception hierarchy for KeyMesh.

All KeyMesh exceptions inherit from KeyMeshError and carry a StatusCode,
so callers can branch on the classification instead of the class.
"""

import enum


class StatusCode(str, enum.Enum):
    """Status classifications surfaced to callers."""

    OK = "ok"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_ARGUMENT = "invalid_argument"
    UNKNOWN = "unknown"


class KeyMeshError(Exception):
    """Base exception for all KeyMesh errors."""

    status: StatusCode = StatusCode.UNKNOWN


class NotFoundError(KeyMeshError):
    """A key manager, catalogue, wrapper or key is not registered."""

    status = StatusCode.NOT_FOUND


class AlreadyExistsError(KeyMeshError):
    """A registration conflicts with an existing, non-equivalent one."""

    status = StatusCode.ALREADY_EXISTS


class InvalidArgumentError(KeyMeshError):
    """Malformed input, violated keyset invariant, or failed verification."""

    status = StatusCode.INVALID_ARGUMENT


class UnknownError(KeyMeshError):
    """A collaborator explicitly refused to answer."""

    status = StatusCode.UNKNOWN


__all__ = [
    "StatusCode",
    "KeyMeshError",
    "NotFoundError",
    "AlreadyExistsError",
    "InvalidArgumentError",
    "UnknownError",
]
