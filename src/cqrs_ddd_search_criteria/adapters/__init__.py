"""Collaborator implementations."""

from .memory import InMemoryRecordStore, InMemorySearchBackend

__all__ = ["InMemoryRecordStore", "InMemorySearchBackend"]
