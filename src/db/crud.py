# src/db/crud.py
from __future__ import annotations

import dataclasses
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Tuple, Type, TypeVar
from uuid import uuid4

from db import models, store
from db.store import STORAGE_KEYS
from utils.errors import NotFoundError, StorageError, ValidationError
from utils.logger import get_logger
from utils.pure import to_float, to_int

_logger = get_logger(__name__)

# the one valid username/password pair
CREDENTIALS = ("Anahi", "2025")


# ---------------------------
# Auth & Session
# ---------------------------


async def login(username: str, password: str) -> Optional[models.User]:
    """Return the User and persist an authenticated session if the pair matches."""
    if (username, password) != CREDENTIALS:
        _logger.info(f"Rejected login for {username!r}")
        return None

    user = models.User(username=CREDENTIALS[0])
    session = models.Session(is_authenticated=True, user=user)
    await store.set_item(STORAGE_KEYS["auth"], session.to_record())
    _logger.info(f"User {user.username} logged in")
    return user


async def logout() -> None:
    await store.remove_item(STORAGE_KEYS["auth"])
    _logger.info("Session cleared")


async def load_session() -> models.Session:
    """Rebuild the session from the store; absent or partial data means logged out."""
    return models.Session.from_record(await store.get_item(STORAGE_KEYS["auth"]))


async def load_theme(default: str = "light") -> str:
    theme = await store.get_item(STORAGE_KEYS["theme"])
    return theme if theme in ("light", "dark") else default


async def save_theme(theme: str) -> bool:
    return await store.set_item(STORAGE_KEYS["theme"], theme)


# ---------------------------
# Collections (Products, Clients)
# ---------------------------

E = TypeVar("E", bound=models.Entity)


class Collection(Generic[E]):
    """
    Ordered, write-through collection of one entity type.

    The list held here is the single source of truth for its screen; every
    mutation is flushed to the store before the call returns. A failed flush
    is logged and the in-memory change stands, unless strict_writes is set,
    in which case StorageError is raised after the change.
    """

    storage_key: str = ""
    model: Type[E]
    required_fields: Tuple[str, ...] = ()
    int_fields: Tuple[str, ...] = ()
    float_fields: Tuple[str, ...] = ()

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        strict_writes: bool = False,
    ) -> None:
        self._items: List[E] = []
        self._clock = clock
        self.strict_writes = strict_writes
        self.loaded = False

    # ---- reads ----

    def list(self) -> List[E]:
        return list(self._items)

    def get(self, entity_id: str) -> Optional[E]:
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    def distinct(self, field: str) -> List[str]:
        """Unique non-empty values of field, in first-seen order."""
        seen: Dict[str, None] = {}
        for item in self._items:
            value = getattr(item, field)
            if value:
                seen.setdefault(value, None)
        return list(seen)

    def __len__(self) -> int:
        return len(self._items)

    async def load(self) -> List[E]:
        records = await store.get_item(self.storage_key)
        items: List[E] = []
        if isinstance(records, list):
            for record in records:
                try:
                    items.append(self.model.from_record(record))
                except (KeyError, ValueError, TypeError):
                    _logger.warning(
                        f"Skipping malformed record in {self.storage_key}: {record!r}"
                    )
        elif records is not None:
            _logger.warning(f"Ignoring non-list value under {self.storage_key}")
        self._items = items
        self.loaded = True
        _logger.debug(f"Loaded {len(items)} entities from {self.storage_key}")
        return self.list()

    # ---- writes ----

    def _clean(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Strip strings and coerce numbers for the model's own fields."""
        names = {f.name for f in dataclasses.fields(self.model)}
        cleaned: Dict[str, Any] = {}
        for key, value in fields.items():
            if key not in names or key in ("id", "created_at", "updated_at"):
                continue
            if key in self.int_fields:
                value = to_int(value)
            elif key in self.float_fields:
                value = to_float(value)
            else:
                value = "" if value is None else str(value).strip()
            cleaned[key] = value
        return cleaned

    def _validate(self, values: Dict[str, Any]) -> None:
        missing = [f for f in self.required_fields if not values.get(f)]
        if missing:
            raise ValidationError(missing, f"Missing required fields: {', '.join(missing)}")
        negative = [
            f for f in self.int_fields + self.float_fields if values.get(f, 0) < 0
        ]
        if negative:
            raise ValidationError(negative, f"Negative values: {', '.join(negative)}")

    def _build(self, fields: Dict[str, Any], now: datetime) -> E:
        values = {f: 0 for f in self.int_fields}
        values.update({f: 0.0 for f in self.float_fields})
        values.update({f: "" for f in self.required_fields})
        values.update(self._clean(fields))
        self._validate(values)
        return self.model(id=uuid4().hex, created_at=now, updated_at=now, **values)

    async def _flush(self) -> bool:
        ok = await store.set_item(
            self.storage_key, [item.to_record() for item in self._items]
        )
        if not ok:
            _logger.error(f"Changes to {self.storage_key} were not persisted")
            if self.strict_writes:
                raise StorageError(f"Could not persist {self.storage_key}")
        return ok

    async def create(self, fields: Dict[str, Any]) -> E:
        entity = self._build(fields, self._clock())
        self._items.append(entity)
        await self._flush()
        _logger.info(f"Created {self.model.__name__} {entity.id}")
        return entity

    async def update(self, entity_id: str, fields: Dict[str, Any]) -> E:
        for idx, item in enumerate(self._items):
            if item.id == entity_id:
                break
        else:
            raise NotFoundError(entity_id)

        changes = self._clean(fields)
        values = {f: getattr(item, f) for f in self.required_fields}
        values.update({f: getattr(item, f) for f in self.int_fields + self.float_fields})
        values.update(changes)
        self._validate(values)

        now = self._clock()
        if now <= item.updated_at:
            now = item.updated_at + timedelta(microseconds=1)
        updated = dataclasses.replace(item, updated_at=now, **changes)
        self._items[idx] = updated
        await self._flush()
        _logger.info(f"Updated {self.model.__name__} {entity_id}")
        return updated

    async def delete(self, entity_id: str) -> bool:
        """Remove the entity; a missing id is a no-op and returns False."""
        remaining = [item for item in self._items if item.id != entity_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        await self._flush()
        _logger.info(f"Deleted {self.model.__name__} {entity_id}")
        return True

    async def clear(self) -> None:
        self._items = []
        await self._flush()
        _logger.info(f"Cleared {self.storage_key}")

    async def extend(self, records: Iterable[Dict[str, Any]]) -> List[E]:
        """
        Append one new entity per field dict, with fresh ids and timestamps.
        Dicts that fail validation are skipped. One flush for the whole batch.
        """
        now = self._clock()
        added: List[E] = []
        for fields in records:
            try:
                added.append(self._build(fields, now))
            except ValidationError as e:
                _logger.debug(f"Skipping invalid record {fields!r}: {e}")
        if added:
            self._items.extend(added)
            await self._flush()
        _logger.info(f"Imported {len(added)} entities into {self.storage_key}")
        return added


class ProductCollection(Collection[models.Product]):
    storage_key = STORAGE_KEYS["products"]
    model = models.Product
    required_fields = ("name", "location")
    int_fields = ("quantity",)
    float_fields = ("cost", "sale_price")


class ClientCollection(Collection[models.Client]):
    storage_key = STORAGE_KEYS["clients"]
    model = models.Client
    required_fields = ("name", "contact", "shipping_location")
