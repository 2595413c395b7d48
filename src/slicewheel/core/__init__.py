"""
Core modules for slicewheel.

This package contains the fundamental building blocks:
- types: Records and entities (Slice, Template, User, GradedSlice)
- store: Name-keyed collections over a key-value medium
- integrity: Rename/delete cascades and the commit protocol
- session: Edit sessions with reset and commit
"""

from .exceptions import (
    DanglingReferenceError,
    DuplicateNameError,
    EntityNotFoundError,
    ImportFormatError,
    SliceWheelError,
    StorageQuotaError,
)
from .integrity import IntegrityEngine
from .session import EditSession
from .store import WheelStore
from .types import (
    CollectionKind,
    GradedSlice,
    GradedSliceRecord,
    Slice,
    SliceRecord,
    Template,
    TemplateRecord,
    User,
    UserRecord,
    make_key,
)

__all__ = [
    # Types
    "CollectionKind", "Slice", "Template", "User", "GradedSlice",
    "SliceRecord", "TemplateRecord", "UserRecord", "GradedSliceRecord", "make_key",
    # Storage
    "WheelStore", "IntegrityEngine", "EditSession",
    # Errors
    "SliceWheelError", "DuplicateNameError", "DanglingReferenceError",
    "ImportFormatError", "StorageQuotaError", "EntityNotFoundError",
]
