"""
Referential integrity for slice references.

Templates and users refer to slices by name, so a slice rename or delete has
to be propagated by hand. Every operation here follows the same order:

1. Validate (name collisions) before touching anything.
2. Rewrite dependents: templates, then users. Only changed collections are
   written.
3. Rewrite the source collection last.

Each collection write is atomic on its own; the group is not.
"""

import logging
from typing import Set

from .exceptions import DuplicateNameError
from .store import WheelStore
from .types import CollectionKind, Slice, Template, User

logger = logging.getLogger(__name__)


class IntegrityEngine:
    """Commit, delete and cascade operations for the three collections."""

    def __init__(self, store: WheelStore):
        self.store = store

    # --- Cascades ---

    def on_slice_renamed(self, old_name: str, new_name: str) -> Set[CollectionKind]:
        """
        Point every reference to `old_name` at `new_name`, in place.

        Template positions and user grades/descriptions are preserved.

        Returns:
            The collections that were rewritten.
        """
        changed: Set[CollectionKind] = set()

        templates = self.store.load_collection(CollectionKind.TEMPLATE)
        templates_changed = False
        for record in templates.values():
            for i, slice_name in enumerate(record.slice_names):
                if slice_name == old_name:
                    record.slice_names[i] = new_name
                    templates_changed = True
        if templates_changed:
            self.store.save_collection(CollectionKind.TEMPLATE, templates)
            changed.add(CollectionKind.TEMPLATE)

        users = self.store.load_collection(CollectionKind.USER)
        users_changed = False
        for record in users.values():
            for entry in record.slices:
                if entry.slice_name == old_name:
                    entry.slice_name = new_name
                    users_changed = True
        if users_changed:
            self.store.save_collection(CollectionKind.USER, users)
            changed.add(CollectionKind.USER)

        logger.debug(f"Rename '{old_name}' -> '{new_name}' rewrote {sorted(changed)}")
        return changed

    def on_slice_deleted(self, name: str) -> Set[CollectionKind]:
        """
        Drop every reference to `name`; remaining entries keep their order.

        Returns:
            The collections that were rewritten.
        """
        changed: Set[CollectionKind] = set()

        templates = self.store.load_collection(CollectionKind.TEMPLATE)
        templates_changed = False
        for record in templates.values():
            kept = [s for s in record.slice_names if s != name]
            if len(kept) != len(record.slice_names):
                record.slice_names = kept
                templates_changed = True
        if templates_changed:
            self.store.save_collection(CollectionKind.TEMPLATE, templates)
            changed.add(CollectionKind.TEMPLATE)

        users = self.store.load_collection(CollectionKind.USER)
        users_changed = False
        for record in users.values():
            kept = [entry for entry in record.slices if entry.slice_name != name]
            if len(kept) != len(record.slices):
                record.slices = kept
                users_changed = True
        if users_changed:
            self.store.save_collection(CollectionKind.USER, users)
            changed.add(CollectionKind.USER)

        logger.debug(f"Delete '{name}' rewrote {sorted(changed)}")
        return changed

    # --- Commit protocol ---

    def _check_collision(self, kind: CollectionKind, entity, records) -> None:
        if (entity.is_new or entity.is_renamed) and entity.name in records:
            raise DuplicateNameError(kind, entity.name)

    def commit_slice(self, slice_: Slice) -> None:
        """
        Persist a slice, cascading a rename into templates and users.

        Raises:
            DuplicateNameError: The new name belongs to another slice. Nothing
                is written.
        """
        slices = self.store.load_collection(CollectionKind.SLICE)
        self._check_collision(CollectionKind.SLICE, slice_, slices)

        if slice_.is_renamed:
            self.on_slice_renamed(slice_.initial_name, slice_.name)
            slices.pop(slice_.initial_name, None)

        slices[slice_.name] = slice_.to_record()
        self.store.save_collection(CollectionKind.SLICE, slices)
        slice_.mark_persisted()

    def commit_template(self, template: Template) -> None:
        """
        Persist a template under its (possibly new) name.

        Raises:
            DuplicateNameError: The new name belongs to another template.
        """
        templates = self.store.load_collection(CollectionKind.TEMPLATE)
        self._check_collision(CollectionKind.TEMPLATE, template, templates)

        if template.is_renamed:
            templates.pop(template.initial_name, None)

        templates[template.name] = template.to_record()
        self.store.save_collection(CollectionKind.TEMPLATE, templates)
        template.mark_persisted()

    def commit_user(self, user: User) -> None:
        """
        Persist a user under its (possibly new) name.

        Raises:
            DuplicateNameError: The new name belongs to another user.
        """
        users = self.store.load_collection(CollectionKind.USER)
        self._check_collision(CollectionKind.USER, user, users)

        if user.is_renamed:
            users.pop(user.initial_name, None)

        users[user.name] = user.to_record()
        self.store.save_collection(CollectionKind.USER, users)
        user.mark_persisted()

    # --- Deletes ---

    def delete_slice(self, name: str) -> bool:
        """
        Delete a slice and strip every reference to it.

        Returns:
            True if the slice existed.
        """
        self.on_slice_deleted(name)

        slices = self.store.load_collection(CollectionKind.SLICE)
        if name not in slices:
            return False
        del slices[name]
        self.store.save_collection(CollectionKind.SLICE, slices)
        return True

    def delete_template(self, name: str) -> bool:
        return self._delete_record(CollectionKind.TEMPLATE, name)

    def delete_user(self, name: str) -> bool:
        return self._delete_record(CollectionKind.USER, name)

    def _delete_record(self, kind: CollectionKind, name: str) -> bool:
        records = self.store.load_collection(kind)
        if name not in records:
            return False
        del records[name]
        self.store.save_collection(kind, records)
        return True
