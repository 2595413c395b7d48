"""
Exceptions raised by the slicewheel core.

Storage read corruption is deliberately absent: it is recovered locally by
the store and never surfaces as an error.
"""


class SliceWheelError(Exception):
    """Base class for all slicewheel errors."""


class DuplicateNameError(SliceWheelError):
    """
    Raised when a commit would give an entity a name already used by a
    different entity of the same kind.

    Attributes:
        kind: The collection the collision happened in.
        name: The colliding name.
    """

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} with name '{name}' already exists")


class DanglingReferenceError(SliceWheelError):
    """
    Raised when a template or user references a slice that is missing from
    the slice collection. Signals an earlier integrity violation.

    Attributes:
        kind: Kind of the referencing record (template or user).
        owner: Name of the referencing record.
        slice_name: The unresolved slice name.
    """

    def __init__(self, kind: str, owner: str, slice_name: str):
        self.kind = kind
        self.owner = owner
        self.slice_name = slice_name
        super().__init__(
            f"{kind.capitalize()} '{owner}' references unknown slice '{slice_name}'"
        )


class ImportFormatError(SliceWheelError):
    """Raised when a bulk import payload is malformed. Nothing is applied."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Invalid import data: {message}")


class StorageQuotaError(SliceWheelError):
    """
    Raised when a write would push the medium past its byte budget.

    Attributes:
        key: The key being written.
        needed: Total bytes the medium would hold after the write.
        limit: The configured budget.
    """

    def __init__(self, key: str, needed: int, limit: int):
        self.key = key
        self.needed = needed
        self.limit = limit
        super().__init__(
            f"Writing '{key}' needs {needed} bytes, storage limit is {limit} bytes"
        )


class EntityNotFoundError(SliceWheelError):
    """Raised when a named record does not exist in its collection."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} '{name}' not found")
