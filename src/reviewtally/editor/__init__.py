"""Editor-facing document models."""

from .document_model import DocumentState

__all__ = ["DocumentState"]
