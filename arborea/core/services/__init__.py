from __future__ import annotations

"""High-level editor services (document files, structural edits)."""

from .document_service import DocumentService  # noqa: F401
from .structure_editing_service import OperationResult, StructureEditingService  # noqa: F401

__all__: list[str] = [
    "DocumentService",
    "OperationResult",
    "StructureEditingService",
]
