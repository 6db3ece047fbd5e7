# provide dataclass models
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional

# attribute name -> key used in the persisted JSON records
_RECORD_KEYS = {
    "sale_price": "salePrice",
    "shipping_location": "shippingLocation",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


class Entity:
    """
    Mixin for the persisted records, converting to/from the stored dicts.
    Timestamps are kept as ISO-8601 strings in storage.
    """

    id: str
    created_at: datetime
    updated_at: datetime

    def to_record(self) -> Dict[str, Any]:
        record = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            record[_RECORD_KEYS.get(f.name, f.name)] = value
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]):
        """Raises KeyError/ValueError/TypeError if the record is malformed."""
        kwargs = {}
        for f in fields(cls):
            value = record[_RECORD_KEYS.get(f.name, f.name)]
            if f.name in ("created_at", "updated_at"):
                value = datetime.fromisoformat(value)
            elif f.name == "quantity":
                value = int(value)
            elif f.name in ("cost", "sale_price"):
                value = float(value)
            else:
                value = str(value)
            kwargs[f.name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class Product(Entity):
    id: str
    name: str
    location: str
    quantity: int
    cost: float
    sale_price: float
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Client(Entity):
    id: str
    name: str
    contact: str
    shipping_location: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class User:
    username: str


@dataclass(frozen=True)
class Session:
    is_authenticated: bool = False
    user: Optional[User] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "isAuthenticated": self.is_authenticated,
            "user": {"username": self.user.username} if self.user else None,
        }

    @classmethod
    def from_record(cls, record: Any) -> "Session":
        """Anything that is not a complete authenticated session means logged out."""
        if not isinstance(record, dict) or record.get("isAuthenticated") is not True:
            return cls()
        user = record.get("user")
        if not isinstance(user, dict) or not user.get("username"):
            return cls()
        return cls(is_authenticated=True, user=User(username=str(user["username"])))
