"""
Normalized store over a key-value medium.

Each collection (slices, templates, users) lives under its own medium key as
a JSON object mapping entity name to raw record. Reads fail soft: anything
missing or malformed degrades to an empty collection so the user can keep
working. Writes always replace a whole collection.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from .exceptions import EntityNotFoundError, ImportFormatError
from .storage.base import KeyValueMedium
from .types import CollectionKind, SliceRecord, TemplateRecord, UserRecord

logger = logging.getLogger(__name__)

RECORD_TYPES: Dict[CollectionKind, Type[BaseModel]] = {
    CollectionKind.SLICE: SliceRecord,
    CollectionKind.TEMPLATE: TemplateRecord,
    CollectionKind.USER: UserRecord,
}


def _mismatched_name(records: Dict[str, BaseModel]) -> Optional[str]:
    """First key whose record carries a different name, or None."""
    for key, record in records.items():
        if record.name != key:
            return key
    return None


def _slice_references(kind: CollectionKind, record: BaseModel) -> List[str]:
    if kind == CollectionKind.TEMPLATE:
        return list(record.slice_names)
    return [entry.slice_name for entry in record.slices]


class WheelStore:
    """
    Name-keyed access to the three collections.

    Regular writes never check cross-collection references; that is the
    IntegrityEngine's job. Bulk import checks them before writing, and
    materialize detects any that dangle.
    """

    def __init__(self, medium: KeyValueMedium):
        self.medium = medium

    def _read_raw(self, kind: CollectionKind) -> Dict[str, Any]:
        raw = self.medium.get(kind.storage_key)
        if raw is None:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Corrupt {kind} collection, using empty: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Corrupt {kind} collection, expected an object, using empty")
            return {}
        return data

    def load_collection(self, kind: CollectionKind) -> Dict[str, BaseModel]:
        """
        Load one collection as an insertion-ordered name -> record mapping.

        Never raises on bad data: a missing key, malformed JSON, an invalid
        record or a record stored under a key other than its name all yield
        an empty mapping.
        """
        data = self._read_raw(kind)
        record_type = RECORD_TYPES[kind]
        try:
            records = {
                name: record_type.model_validate(value)
                for name, value in data.items()
            }
        except ValidationError as e:
            logger.warning(f"Invalid {kind} records, using empty collection: {e}")
            return {}

        mismatched = _mismatched_name(records)
        if mismatched is not None:
            logger.warning(
                f"Corrupt {kind} collection, key '{mismatched}' does not match "
                f"its record name, using empty"
            )
            return {}
        return records

    def save_collection(self, kind: CollectionKind, mapping: Dict[str, BaseModel]) -> None:
        """Serialize and persist a whole collection, replacing what was stored."""
        payload = {
            name: record.model_dump(by_alias=True, exclude_none=True)
            for name, record in mapping.items()
        }
        self.medium.set(kind.storage_key, json.dumps(payload, separators=(",", ":")))
        logger.debug(f"Persisted {len(payload)} {kind} record(s)")

    def materialize(self, kind: CollectionKind) -> List[Any]:
        """
        Build rich entities for a collection.

        Templates and users have their slice names resolved against the slice
        collection.

        Raises:
            DanglingReferenceError: A referenced slice is missing.
        """
        slices = self.load_collection(CollectionKind.SLICE)
        if kind == CollectionKind.SLICE:
            return [record.to_entity() for record in slices.values()]
        return [record.to_entity(slices) for record in self.load_collection(kind).values()]

    def get_entity(self, kind: CollectionKind, name: str) -> Any:
        """
        Materialize a single entity by name.

        Raises:
            EntityNotFoundError: No record with that name.
            DanglingReferenceError: A referenced slice is missing.
        """
        records = self.load_collection(kind)
        record = records.get(name)
        if record is None:
            raise EntityNotFoundError(kind, name)
        if kind == CollectionKind.SLICE:
            return record.to_entity()
        return record.to_entity(self.load_collection(CollectionKind.SLICE))

    def has(self, kind: CollectionKind, name: str) -> bool:
        return name in self.load_collection(kind)

    # --- Bulk operations ---

    def export_data(self) -> Dict[str, Any]:
        """The three raw collections keyed by their medium keys."""
        return {kind.storage_key: self._read_raw(kind) for kind in CollectionKind}

    def export_json(self) -> str:
        """Backup document: one JSON object with exactly three top-level keys."""
        return json.dumps(self.export_data(), separators=(",", ":"))

    def import_json(self, text: str) -> List[CollectionKind]:
        """
        Replace collections wholesale from a backup document.

        Keys absent from the upload leave their collection untouched. The
        whole upload is validated before anything is written.

        Returns:
            The kinds that were replaced.

        Raises:
            ImportFormatError: The document or any record in it is malformed,
                a record key differs from its name, or a template or user
                would reference a slice missing after the import.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ImportFormatError(f"not valid JSON ({e})") from e

        if not isinstance(data, dict):
            raise ImportFormatError("top level must be an object")

        staged: Dict[CollectionKind, Dict[str, BaseModel]] = {}
        for kind in CollectionKind:
            if kind.storage_key not in data:
                continue
            collection = data[kind.storage_key]
            if not isinstance(collection, dict):
                raise ImportFormatError(f"'{kind.storage_key}' must be an object")
            record_type = RECORD_TYPES[kind]
            try:
                staged[kind] = {
                    name: record_type.model_validate(value)
                    for name, value in collection.items()
                }
            except ValidationError as e:
                raise ImportFormatError(f"invalid {kind} record: {e}") from e

            mismatched = _mismatched_name(staged[kind])
            if mismatched is not None:
                raise ImportFormatError(
                    f"{kind} '{mismatched}' is stored under a key that differs from its name"
                )

        self._check_import_references(staged)

        for kind, records in staged.items():
            self.save_collection(kind, records)
            logger.info(f"Imported {len(records)} {kind} record(s)")

        return list(staged)

    def _check_import_references(self, staged: Dict[CollectionKind, Dict[str, BaseModel]]) -> None:
        """
        Ensure every template and user left after the import resolves
        against the slices left after the import.
        """
        if CollectionKind.SLICE in staged:
            slice_names = set(staged[CollectionKind.SLICE])
        else:
            slice_names = set(self.load_collection(CollectionKind.SLICE))

        for kind in (CollectionKind.TEMPLATE, CollectionKind.USER):
            if kind in staged:
                records = staged[kind]
            elif CollectionKind.SLICE in staged:
                records = self.load_collection(kind)
            else:
                continue
            for owner, record in records.items():
                for slice_name in _slice_references(kind, record):
                    if slice_name not in slice_names:
                        raise ImportFormatError(
                            f"{kind} '{owner}' references unknown slice '{slice_name}'"
                        )

    def reset(self) -> None:
        """Empty all three collections."""
        for kind in CollectionKind:
            self.save_collection(kind, {})
        logger.info("Reset all collections")

    def stats(self) -> Dict[str, Any]:
        """Record counts per collection plus medium usage."""
        return {
            "slices": len(self.load_collection(CollectionKind.SLICE)),
            "templates": len(self.load_collection(CollectionKind.TEMPLATE)),
            "users": len(self.load_collection(CollectionKind.USER)),
            "size_bytes": self.medium.size_bytes(),
            "quota_bytes": self.medium.quota_bytes,
        }
