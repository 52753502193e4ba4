"""Pydantic models for external payloads."""

from .directory import FaqRecord, FaqsDocument, UserRecord, UsersDocument

__all__ = [
    "FaqRecord",
    "FaqsDocument",
    "UserRecord",
    "UsersDocument",
]
