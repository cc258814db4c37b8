"""Exceptions raised by the storage layer."""

from __future__ import annotations


class StorageError(Exception):
    """Base class for durable storage problems."""


class SchemaMigrationError(StorageError):
    """The on-disk schema cannot be brought to the current version."""

    def __init__(self, message: str, found_version: int, target_version: int) -> None:
        super().__init__(message)
        self.found_version = found_version
        self.target_version = target_version


__all__ = ["StorageError", "SchemaMigrationError"]
