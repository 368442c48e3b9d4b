"""Errors raised by documents, collections and stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .refs import DocumentRef


class DocumentRepoError(Exception):
    """Base class for every error raised by doc_repo."""


class NotFoundError(DocumentRepoError):
    """Raised when a document cannot be located."""

    def __init__(self, ref: "DocumentRef", message: Optional[str] = None) -> None:
        self.ref = ref
        super().__init__(message or f"Document {ref.path} not found")


class StoreFailureError(DocumentRepoError):
    """Raised when the underlying store call fails."""


class InvalidReferenceError(StoreFailureError, ValueError):
    """Raised when an id or collection name cannot form a store reference."""
