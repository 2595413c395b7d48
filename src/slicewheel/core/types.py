"""
Core type definitions for slicewheel.

Two layers live here:
- Records (SliceRecord, TemplateRecord, UserRecord): the raw, name-keyed
  shapes persisted in the medium. Cross references are plain slice names.
- Entities (Slice, Template, User, GradedSlice): the materialized values the
  UI edits. Templates and users hold full Slice objects.

Entities remember the name they were loaded under so a commit can tell a
rename apart from an in-place edit.
"""

from enum import StrEnum
from typing import TYPE_CHECKING, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PrivateAttr

from ..config import (
    DEFAULT_GRADE,
    MAX_GRADE,
    MIN_GRADE,
    PREVIEW_GRADE,
    SLICES_KEY,
    TEMPLATES_KEY,
    USERS_KEY,
)
from .exceptions import DanglingReferenceError

if TYPE_CHECKING:
    from .store import WheelStore

DEFAULT_SLICE_COLOR = "#ffffff"
DEFAULT_NAME = "untitled"


class CollectionKind(StrEnum):
    """The three independent, name-keyed collections."""
    SLICE = "slice"
    TEMPLATE = "template"
    USER = "user"

    @property
    def storage_key(self) -> str:
        """Key of this collection in the key-value medium."""
        return {
            CollectionKind.SLICE: SLICES_KEY,
            CollectionKind.TEMPLATE: TEMPLATES_KEY,
            CollectionKind.USER: USERS_KEY,
        }[self]


def make_key(name: str) -> str:
    """Rendering key for a display name: lower-cased, spaces to underscores."""
    return name.lower().replace(" ", "_")


# --- Records ---

class SliceRecord(BaseModel):
    """Persisted slice: `{name, color, description?}`."""
    name: str = ""
    color: str = DEFAULT_SLICE_COLOR
    description: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("description", "desc")
    )

    model_config = ConfigDict(extra="ignore")

    def to_entity(self) -> "Slice":
        return Slice.from_record(self)


class TemplateRecord(BaseModel):
    """Persisted template: `{name, sliceNames}`."""
    name: str = ""
    slice_names: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("sliceNames", "slice_names"),
        serialization_alias="sliceNames",
    )

    model_config = ConfigDict(extra="ignore")

    def to_entity(self, slices: Dict[str, SliceRecord]) -> "Template":
        """Resolve slice names against the slice collection."""
        resolved = []
        for slice_name in self.slice_names:
            record = slices.get(slice_name)
            if record is None:
                raise DanglingReferenceError(CollectionKind.TEMPLATE, self.name, slice_name)
            resolved.append(record.to_entity())
        return Template.from_record(self, resolved)


class GradedSliceRecord(BaseModel):
    """Persisted per-user grade: `{sliceName, grade, gradeDescription?}`."""
    slice_name: str = Field(
        validation_alias=AliasChoices("sliceName", "slice_name"),
        serialization_alias="sliceName",
    )
    grade: int = Field(default=DEFAULT_GRADE, ge=MIN_GRADE, le=MAX_GRADE)
    grade_description: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gradeDescription", "gradeDesc", "grade_description"),
        serialization_alias="gradeDescription",
    )

    model_config = ConfigDict(extra="ignore")


class UserRecord(BaseModel):
    """Persisted user: `{name, slices: [GradedSliceRecord]}`."""
    name: str = ""
    slices: List[GradedSliceRecord] = Field(
        default_factory=list,
        validation_alias=AliasChoices("slices", "storageSlices"),
    )

    model_config = ConfigDict(extra="ignore")

    def to_entity(self, slices: Dict[str, SliceRecord]) -> "User":
        """Resolve graded slice names against the slice collection."""
        graded = []
        for entry in self.slices:
            record = slices.get(entry.slice_name)
            if record is None:
                raise DanglingReferenceError(CollectionKind.USER, self.name, entry.slice_name)
            graded.append(GradedSlice(
                slice=record.to_entity(),
                grade=entry.grade,
                grade_description=entry.grade_description,
            ))
        return User.from_record(self, graded)


# --- Entities ---

class _Entity(BaseModel):
    """
    Shared behaviour of the three editable kinds.

    `_initial_name` is the name the entity was persisted under, or None for an
    entity that has never been committed.
    """
    name: str

    _initial_name: Optional[str] = PrivateAttr(default=None)

    model_config = ConfigDict(validate_assignment=True)

    @property
    def key(self) -> str:
        return make_key(self.name)

    @property
    def initial_name(self) -> Optional[str]:
        return self._initial_name

    @property
    def is_new(self) -> bool:
        return self._initial_name is None

    @property
    def is_renamed(self) -> bool:
        return self._initial_name is not None and self._initial_name != self.name

    def mark_persisted(self) -> None:
        """Record the current name as the stored identity."""
        self._initial_name = self.name

    def deep_clone(self):
        """Full recursive copy; initial names of all nested entities survive."""
        return self.model_copy(deep=True)


class Slice(_Entity):
    """A named, colored attribute definition."""
    color: str = DEFAULT_SLICE_COLOR
    description: Optional[str] = None

    @classmethod
    def default(cls) -> "Slice":
        return cls(name=DEFAULT_NAME, color=DEFAULT_SLICE_COLOR)

    @classmethod
    def from_record(cls, record: SliceRecord) -> "Slice":
        entity = cls(name=record.name, color=record.color, description=record.description)
        entity.mark_persisted()
        return entity

    def to_record(self) -> SliceRecord:
        return SliceRecord(name=self.name, color=self.color, description=self.description)

    def clone(self) -> "Slice":
        return self.model_copy()

    def graded(self, grade: int = PREVIEW_GRADE) -> "GradedSlice":
        """Wrap the slice for drawing on its own."""
        return GradedSlice(slice=self, grade=grade)

    @classmethod
    def from_storage(cls, store: "WheelStore") -> List["Slice"]:
        return store.materialize(CollectionKind.SLICE)

    @classmethod
    def get(cls, store: "WheelStore", name: str) -> "Slice":
        return store.get_entity(CollectionKind.SLICE, name)

    def to_storage(self, store: "WheelStore") -> None:
        from .integrity import IntegrityEngine
        IntegrityEngine(store).commit_slice(self)

    def delete_storage(self, store: "WheelStore") -> bool:
        from .integrity import IntegrityEngine
        if self.is_new:
            return False
        return IntegrityEngine(store).delete_slice(self._initial_name)


class GradedSlice(BaseModel):
    """A slice paired with one user's grade and optional grade description."""
    slice: Slice
    grade: int = Field(default=DEFAULT_GRADE, ge=MIN_GRADE, le=MAX_GRADE)
    grade_description: Optional[str] = None

    model_config = ConfigDict(validate_assignment=True)

    @property
    def name(self) -> str:
        return self.slice.name

    @property
    def color(self) -> str:
        return self.slice.color

    @property
    def description(self) -> Optional[str]:
        return self.slice.description

    @property
    def key(self) -> str:
        return self.slice.key

    def clone(self) -> "GradedSlice":
        """Copy sharing the underlying Slice."""
        return self.model_copy()

    def deep_clone(self) -> "GradedSlice":
        return self.model_copy(deep=True)

    def to_record(self) -> GradedSliceRecord:
        return GradedSliceRecord(
            slice_name=self.name,
            grade=self.grade,
            grade_description=self.grade_description,
        )


class Template(_Entity):
    """A named, ordered subset of slices."""
    slices: List[Slice] = Field(default_factory=list)

    @classmethod
    def default(cls) -> "Template":
        return cls(name=DEFAULT_NAME)

    @classmethod
    def from_record(cls, record: TemplateRecord, slices: List[Slice]) -> "Template":
        entity = cls(name=record.name, slices=slices)
        entity.mark_persisted()
        return entity

    def to_record(self) -> TemplateRecord:
        return TemplateRecord(name=self.name, slice_names=[s.name for s in self.slices])

    def clone(self) -> "Template":
        """New membership list holding the same Slice objects."""
        return self.model_copy(update={"slices": list(self.slices)})

    def index_of(self, slice_name: str) -> int:
        for i, member in enumerate(self.slices):
            if member.name == slice_name:
                return i
        return -1

    def toggle_membership(self, item: Slice) -> bool:
        """
        Append the slice if absent, remove it if present (by name).

        Returns:
            True if the slice is a member afterwards.
        """
        index = self.index_of(item.name)
        if index == -1:
            self.slices.append(item)
            return True
        del self.slices[index]
        return False

    def graded_slices(self, grade: int = PREVIEW_GRADE) -> List[GradedSlice]:
        return [s.graded(grade) for s in self.slices]

    def summary(self) -> str:
        return ", ".join(s.name for s in self.slices)

    @classmethod
    def from_storage(cls, store: "WheelStore") -> List["Template"]:
        return store.materialize(CollectionKind.TEMPLATE)

    @classmethod
    def get(cls, store: "WheelStore", name: str) -> "Template":
        return store.get_entity(CollectionKind.TEMPLATE, name)

    def to_storage(self, store: "WheelStore") -> None:
        from .integrity import IntegrityEngine
        IntegrityEngine(store).commit_template(self)

    def delete_storage(self, store: "WheelStore") -> bool:
        from .integrity import IntegrityEngine
        if self.is_new:
            return False
        return IntegrityEngine(store).delete_template(self._initial_name)


class User(_Entity):
    """A person's wheel: one grade per tracked slice."""
    slices: List[GradedSlice] = Field(default_factory=list)

    @classmethod
    def default(cls) -> "User":
        return cls(name=DEFAULT_NAME)

    @classmethod
    def from_record(cls, record: UserRecord, slices: List[GradedSlice]) -> "User":
        entity = cls(name=record.name, slices=slices)
        entity.mark_persisted()
        return entity

    def to_record(self) -> UserRecord:
        return UserRecord(name=self.name, slices=[gs.to_record() for gs in self.slices])

    def clone(self) -> "User":
        """New graded list holding the same GradedSlice objects."""
        return self.model_copy(update={"slices": list(self.slices)})

    def find(self, slice_name: str) -> Optional[GradedSlice]:
        for graded in self.slices:
            if graded.name == slice_name:
                return graded
        return None

    def apply_template(self, template: Template, default_grade: int = DEFAULT_GRADE) -> None:
        """
        Rebuild the graded list from a template.

        Order follows the template. Slices already graded keep their grade and
        description, new ones get `default_grade`, others are dropped.
        """
        existing = {graded.name: graded for graded in self.slices}
        rebuilt = []
        for member in template.slices:
            graded = existing.get(member.name)
            if graded is None:
                graded = GradedSlice(slice=member, grade=default_grade)
            rebuilt.append(graded)
        self.slices = rebuilt

    def summary(self) -> str:
        return ", ".join(f"{gs.name}: {gs.grade}" for gs in self.slices)

    @classmethod
    def from_storage(cls, store: "WheelStore") -> List["User"]:
        return store.materialize(CollectionKind.USER)

    @classmethod
    def get(cls, store: "WheelStore", name: str) -> "User":
        return store.get_entity(CollectionKind.USER, name)

    def to_storage(self, store: "WheelStore") -> None:
        from .integrity import IntegrityEngine
        IntegrityEngine(store).commit_user(self)

    def delete_storage(self, store: "WheelStore") -> bool:
        from .integrity import IntegrityEngine
        if self.is_new:
            return False
        return IntegrityEngine(store).delete_user(self._initial_name)
