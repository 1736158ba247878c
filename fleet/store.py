"""YAML-backed document store for fleet collections."""

import uuid
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Callable, Dict, List, Union

import yaml

from .logger import get_logger

logger = get_logger(__name__)

Record = Dict[str, Any]
Snapshot = List[Record]


class Timestamp:
    """The store's native date value. Call to_date() before doing arithmetic."""

    def __init__(self, value: datetime):
        self._value = value

    @classmethod
    def from_date(cls, value: Union[date, datetime]) -> "Timestamp":
        if isinstance(value, datetime):
            return cls(value)
        return cls(datetime.combine(value, time.min))

    def to_datetime(self) -> datetime:
        return self._value

    def to_date(self) -> date:
        return self._value.date()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Timestamp):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Timestamp({self._value.isoformat()})"


def _wrap(value: Any) -> Any:
    """Turn YAML timestamps into Timestamp objects."""
    if isinstance(value, (date, datetime)):
        return Timestamp.from_date(value)
    return value


def _unwrap(value: Any) -> Any:
    """Turn dates and Timestamps into datetimes YAML can store natively."""
    if isinstance(value, Timestamp):
        return value.to_datetime()
    if isinstance(value, (date, datetime)):
        return Timestamp.from_date(value).to_datetime()
    return value


class YamlStore:
    """
    Document store persisted as one YAML file of named collections.

    Each collection is a list of records (dicts) carrying an "id" key.
    Watchers registered on a collection receive the full snapshot once on
    registration and again after every write to that collection.
    """

    def __init__(self, filename: Union[str, Path]):
        self.filename = Path(filename)
        self._watchers: Dict[str, List[Callable[[Snapshot], None]]] = {}

    def _load(self) -> Dict[str, Any]:
        if not self.filename.exists():
            return {}
        with open(self.filename, "r", encoding="utf-8") as fp:
            return yaml.load(fp, Loader=yaml.SafeLoader) or {}

    def _dump(self, data: Dict[str, Any]) -> None:
        with open(self.filename, "w", encoding="utf-8") as fp:
            yaml.dump(
                data,
                fp,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                width=120,
            )

    def get_all(self, collection: str) -> Snapshot:
        """One-shot read of every record in a collection."""
        records = self._load().get(collection) or []
        return [{k: _wrap(v) for k, v in record.items()} for record in records]

    def watch(
        self, collection: str, on_change: Callable[[Snapshot], None]
    ) -> Callable[[], None]:
        """
        Subscribe to a collection. Returns a callable that unsubscribes.
        """
        self._watchers.setdefault(collection, []).append(on_change)
        on_change(self.get_all(collection))

        def unsubscribe() -> None:
            watchers = self._watchers.get(collection, [])
            if on_change in watchers:
                watchers.remove(on_change)

        return unsubscribe

    def _notify(self, collection: str) -> None:
        watchers = list(self._watchers.get(collection, []))
        if not watchers:
            return
        snapshot = self.get_all(collection)
        # A failing watcher never fails the write
        for on_change in watchers:
            try:
                on_change(snapshot)
            except Exception:
                logger.exception(f"Watcher on {collection} failed")

    def add_one(self, collection: str, record: Record) -> str:
        """Append a record and return its new id."""
        return self.add_batch(collection, [record])[0]

    def add_batch(self, collection: str, records: List[Record]) -> List[str]:
        """Append several records in a single write. Returns their ids."""
        data = self._load()
        if data.get(collection) is None:
            data[collection] = []

        ids = []
        for record in records:
            record_id = uuid.uuid4().hex
            stored = {"id": record_id}
            stored.update(
                {k: _unwrap(v) for k, v in record.items() if k != "id" and v is not None}
            )
            data[collection].append(stored)
            ids.append(record_id)

        self._dump(data)
        logger.debug(f"Wrote {len(ids)} record(s) to {collection}")
        self._notify(collection)
        return ids

    def set_one(self, collection: str, record_id: str, record: Record) -> None:
        """Overwrite an existing record in full."""
        data = self._load()
        records = data.get(collection) or []
        for index, existing in enumerate(records):
            if existing.get("id") == record_id:
                stored = {"id": record_id}
                stored.update(
                    {k: _unwrap(v) for k, v in record.items() if k != "id" and v is not None}
                )
                records[index] = stored
                break
        else:
            raise KeyError(f"No record {record_id!r} in {collection}")

        self._dump(data)
        logger.debug(f"Overwrote {collection}/{record_id}")
        self._notify(collection)
