"""
Edit sessions.

An editor works on a deep copy of the persisted entity. `reset()` throws the
working copy away and `commit()` persists it and makes it the new original.
"""

from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

if TYPE_CHECKING:
    from .store import WheelStore


class Editable(Protocol):
    name: str

    def deep_clone(self): ...
    def to_storage(self, store: "WheelStore") -> None: ...


E = TypeVar("E", bound=Editable)


class EditSession(Generic[E]):
    """
    The `{original, working}` pair behind one open editor.

    Attributes:
        original: Last persisted value (or the default for a new entity).
        working: The copy being edited.
    """

    def __init__(self, original: E):
        self.original = original
        self.working: E = original.deep_clone()

    @property
    def is_dirty(self) -> bool:
        return self.working != self.original

    def reset(self) -> E:
        """Discard edits, reverting to the last persisted value."""
        self.working = self.original.deep_clone()
        return self.working

    def commit(self, store: "WheelStore") -> E:
        """
        Persist the working copy.

        On failure (e.g. DuplicateNameError) the original is left as it was
        and the working copy keeps its edits.
        """
        self.working.to_storage(store)
        self.original = self.working.deep_clone()
        return self.original
