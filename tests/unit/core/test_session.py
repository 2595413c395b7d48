"""Unit tests for edit sessions."""

import pytest

from slicewheel.core.exceptions import DuplicateNameError
from slicewheel.core.session import EditSession
from slicewheel.core.storage.memory import MemoryMedium
from slicewheel.core.store import WheelStore
from slicewheel.core.types import CollectionKind, Slice, SliceRecord, Template


@pytest.fixture
def store():
    s = WheelStore(MemoryMedium())
    s.save_collection(CollectionKind.SLICE, {
        "Focus": SliceRecord(name="Focus", color="#ff0000"),
        "Calm": SliceRecord(name="Calm", color="#0000ff"),
    })
    return s


class TestEditSession:
    def test_working_is_a_deep_copy(self, store):
        session = EditSession(Slice.get(store, "Focus"))
        session.working.color = "#00ff00"
        assert session.original.color == "#ff0000"
        assert session.is_dirty

    def test_reset_reverts(self, store):
        session = EditSession(Slice.get(store, "Focus"))
        session.working.name = "Attention"
        working = session.reset()
        assert working.name == "Focus"
        assert not working.is_renamed
        assert not session.is_dirty

    def test_commit_persists_and_updates_original(self, store):
        session = EditSession(Slice.get(store, "Focus"))
        session.working.name = "Attention"
        session.commit(store)

        assert session.original.name == "Attention"
        assert not session.is_dirty
        assert list(store.load_collection(CollectionKind.SLICE)) == ["Calm", "Attention"]

        # A reset after commit returns to the committed value
        session.working.name = "Other"
        assert session.reset().name == "Attention"

    def test_failed_commit_keeps_original(self, store):
        session = EditSession(Slice.get(store, "Focus"))
        session.working.name = "Calm"
        with pytest.raises(DuplicateNameError):
            session.commit(store)
        assert session.original.name == "Focus"
        assert session.working.name == "Calm"

    def test_new_entity_session(self, store):
        session = EditSession(Template.default())
        session.working.name = "Daily"
        session.working.toggle_membership(Slice.get(store, "Calm"))
        session.commit(store)

        assert Template.get(store, "Daily").summary() == "Calm"
        assert session.original.slices[0].name == "Calm"
