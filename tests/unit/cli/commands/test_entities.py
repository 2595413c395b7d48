"""
Unit tests for the slice, template and user command groups.
"""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from slicewheel.cli.main import main
from slicewheel.core.storage.sqlite import SQLiteMedium
from slicewheel.core.store import WheelStore
from slicewheel.core.types import (
    CollectionKind,
    GradedSliceRecord,
    TemplateRecord,
    UserRecord,
)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def db(tmp_path):
    with patch("pathlib.Path.cwd", return_value=tmp_path):
        yield tmp_path / "wheels.db"


def _run(runner, db, *args):
    return runner.invoke(main, ["--db", str(db), *args])


def _collection(db, kind):
    return WheelStore(SQLiteMedium(db)).load_collection(kind)


@pytest.fixture
def seeded(runner, db):
    """Two slices, a template using both and a user built from it."""
    for args in (
        ["slice", "add", "Focus", "-c", "#ff0000"],
        ["slice", "add", "Calm", "-c", "blue", "--description", "steady"],
        ["template", "add", "Daily", "Focus", "Calm"],
        ["user", "add", "Alex", "--template", "Daily"],
    ):
        result = _run(runner, db, *args)
        assert result.exit_code == 0, result.output
    return db


class TestSliceCommands:
    def test_add_and_list(self, runner, seeded):
        slices = _collection(seeded, CollectionKind.SLICE)
        assert list(slices) == ["Focus", "Calm"]
        assert slices["Calm"].description == "steady"

        result = _run(runner, seeded, "slice", "list")
        assert result.exit_code == 0
        assert "Focus" in result.output

    def test_add_duplicate_fails(self, runner, seeded):
        result = _run(runner, seeded, "slice", "add", "Focus")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_add_invalid_color(self, runner, db):
        result = _run(runner, db, "slice", "add", "Focus", "-c", "not-a-color")
        assert result.exit_code == 2
        assert "not a valid color" in result.output

    def test_rename_cascades(self, runner, seeded):
        result = _run(runner, seeded, "slice", "edit", "Focus", "-n", "Attention")
        assert result.exit_code == 0

        templates = _collection(seeded, CollectionKind.TEMPLATE)
        users = _collection(seeded, CollectionKind.USER)
        assert templates["Daily"].slice_names == ["Attention", "Calm"]
        assert [e.slice_name for e in users["Alex"].slices] == ["Attention", "Calm"]

    def test_rename_onto_existing_fails(self, runner, seeded):
        result = _run(runner, seeded, "slice", "edit", "Focus", "-n", "Calm")
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert list(_collection(seeded, CollectionKind.SLICE)) == ["Focus", "Calm"]

    def test_edit_without_changes(self, runner, seeded):
        result = _run(runner, seeded, "slice", "edit", "Focus")
        assert result.exit_code == 0
        assert "Nothing to change" in result.output

    def test_delete_removes_references(self, runner, seeded):
        result = _run(runner, seeded, "slice", "delete", "Calm")
        assert result.exit_code == 0

        assert _collection(seeded, CollectionKind.TEMPLATE)["Daily"].slice_names == ["Focus"]
        assert len(_collection(seeded, CollectionKind.USER)["Alex"].slices) == 1

    def test_missing_slice(self, runner, db):
        result = _run(runner, db, "slice", "delete", "Ghost")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_list_empty(self, runner, db):
        result = _run(runner, db, "slice", "list")
        assert result.exit_code == 0
        assert "No slices yet" in result.output


class TestTemplateCommands:
    def test_toggle(self, runner, seeded):
        result = _run(runner, seeded, "template", "toggle", "Daily", "Focus")
        assert result.exit_code == 0
        assert "Removed" in result.output
        assert _collection(seeded, CollectionKind.TEMPLATE)["Daily"].slice_names == ["Calm"]

        result = _run(runner, seeded, "template", "toggle", "Daily", "Focus")
        assert "Added" in result.output
        assert _collection(seeded, CollectionKind.TEMPLATE)["Daily"].slice_names == ["Calm", "Focus"]

    def test_add_with_unknown_slice(self, runner, seeded):
        result = _run(runner, seeded, "template", "add", "Broken", "Ghost")
        assert result.exit_code == 1
        assert "Broken" not in _collection(seeded, CollectionKind.TEMPLATE)

    def test_rename_and_delete(self, runner, seeded):
        assert _run(runner, seeded, "template", "rename", "Daily", "Weekday").exit_code == 0
        assert list(_collection(seeded, CollectionKind.TEMPLATE)) == ["Weekday"]

        assert _run(runner, seeded, "template", "delete", "Weekday").exit_code == 0
        assert _collection(seeded, CollectionKind.TEMPLATE) == {}
        assert "Alex" in _collection(seeded, CollectionKind.USER)


class TestUserCommands:
    def test_add_from_template_uses_default_grade(self, runner, seeded):
        alex = _collection(seeded, CollectionKind.USER)["Alex"]
        assert [(e.slice_name, e.grade) for e in alex.slices] == [("Focus", 0), ("Calm", 0)]

    def test_grade(self, runner, seeded):
        result = _run(runner, seeded, "user", "grade", "Alex", "Focus", "7", "--description", "good day")
        assert result.exit_code == 0

        entry = _collection(seeded, CollectionKind.USER)["Alex"].slices[0]
        assert (entry.grade, entry.grade_description) == (7, "good day")

    def test_grade_out_of_range(self, runner, seeded):
        result = _run(runner, seeded, "user", "grade", "Alex", "Focus", "11")
        assert result.exit_code == 2

    def test_grade_unknown_slice(self, runner, seeded):
        result = _run(runner, seeded, "user", "grade", "Alex", "Sleep", "3")
        assert result.exit_code == 1
        assert "has no slice" in result.output

    def test_apply_keeps_shared_grades(self, runner, seeded):
        _run(runner, seeded, "user", "grade", "Alex", "Calm", "6")
        _run(runner, seeded, "slice", "add", "Sleep")
        _run(runner, seeded, "template", "add", "Night", "Sleep", "Calm")

        result = _run(runner, seeded, "user", "apply", "Alex", "Night", "--default-grade", "4")
        assert result.exit_code == 0

        alex = _collection(seeded, CollectionKind.USER)["Alex"]
        assert [(e.slice_name, e.grade) for e in alex.slices] == [("Sleep", 4), ("Calm", 6)]

    def test_show(self, runner, seeded):
        result = _run(runner, seeded, "user", "show", "Alex")
        assert result.exit_code == 0
        assert "Calm" in result.output

    def test_rename_and_delete(self, runner, seeded):
        assert _run(runner, seeded, "user", "rename", "Alex", "Sam").exit_code == 0
        assert list(_collection(seeded, CollectionKind.USER)) == ["Sam"]
        assert _run(runner, seeded, "user", "delete", "Sam").exit_code == 0
        assert _collection(seeded, CollectionKind.USER) == {}


class TestMarkupInNames:
    NAME = "[/] [bold]x"

    def test_bracketed_names_are_listed_verbatim(self, runner, db):
        assert _run(runner, db, "slice", "add", self.NAME, "--description", "[red]").exit_code == 0
        assert _run(runner, db, "template", "add", self.NAME, self.NAME).exit_code == 0
        assert _run(runner, db, "user", "add", self.NAME, "--template", self.NAME).exit_code == 0

        for args in (["slice", "list"], ["template", "list"], ["user", "list"], ["user", "show", self.NAME]):
            result = _run(runner, db, *args)
            assert result.exit_code == 0, result.output
            assert self.NAME in result.output

    def test_unrenderable_color_still_lists(self, runner, db):
        WheelStore(SQLiteMedium(db)).import_json(
            '{"awr-slices": {"Odd": {"name": "Odd", "color": "not-a-color"}}}'
        )
        result = _run(runner, db, "slice", "list")
        assert result.exit_code == 0
        assert "not-a-color" in result.output


class TestDeleteWithDanglingReferences:
    @pytest.fixture
    def broken(self, db):
        """A template and a user pointing at a slice that was never stored."""
        store = WheelStore(SQLiteMedium(db))
        store.save_collection(CollectionKind.TEMPLATE, {
            "Daily": TemplateRecord(name="Daily", slice_names=["Ghost"]),
        })
        store.save_collection(CollectionKind.USER, {
            "Alex": UserRecord(name="Alex", slices=[GradedSliceRecord(slice_name="Ghost", grade=3)]),
        })
        return db

    def test_user_delete(self, runner, broken):
        result = _run(runner, broken, "user", "delete", "Alex")
        assert result.exit_code == 0, result.output
        assert _collection(broken, CollectionKind.USER) == {}

    def test_template_delete(self, runner, broken):
        result = _run(runner, broken, "template", "delete", "Daily")
        assert result.exit_code == 0, result.output
        assert _collection(broken, CollectionKind.TEMPLATE) == {}

    @pytest.mark.parametrize("group", ["slice", "template", "user"])
    def test_delete_missing(self, runner, db, group):
        result = _run(runner, db, group, "delete", "Nobody")
        assert result.exit_code == 1
        assert "not found" in result.output
