"""
Tenant-scoped entity store backing the gateway handlers.

Exposes the small collaborator surface the gateway relies on: ``filter``,
``create`` and ``update`` per content model, plus key lookup and
``last_used`` bookkeeping for API keys. Storage errors are not caught here;
they surface to the gateway's central error handler.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, String, select
from sqlalchemy.orm import Session

from .models.apikey import ApiKey

class EntityStore:
    """filter/create/update over one content model"""

    def __init__(self, model):
        self.model = model
        self._columns = model.column_names()

    def _fits(self, key: str, value: Any) -> bool:
        """Whether ``value`` can be stored in the typed column ``key``"""
        col_type = self.model.__table__.columns[key].type
        if isinstance(col_type, JSON):
            return True
        if isinstance(col_type, String):
            return value is None or isinstance(value, str)
        return value is None

    def _split(self, data: Dict[str, Any]):
        """Separate column values from free-form attributes.

        A value the column type cannot hold (a localized ``{"en": ...}``
        title, a numeric slug) is kept in ``attributes`` under the same key
        and the column is left empty. Non-nullable columns drop such values.
        """
        columns, attributes = {}, {}
        for key, value in data.items():
            if key in self.model.RESERVED_FIELDS:
                continue
            if key not in self._columns:
                attributes[key] = value
            elif self._fits(key, value):
                columns[key] = value
            elif self.model.__table__.columns[key].nullable:
                columns[key] = None
                attributes[key] = value
        return columns, attributes

    def filter(self, db: Session, criteria: Dict[str, Any], sort: Optional[str] = None) -> List[Any]:
        """Return records equal to every criterion.

        String criteria on text columns go to SQL; anything else (JSON
        attributes, non-string values) is matched on the loaded rows.
        ``sort`` is a field name, prefixed with ``-`` for descending order.
        """
        stmt = select(self.model)
        residual = {}
        for key, value in criteria.items():
            if key in self._columns and isinstance(value, str) \
                    and isinstance(self.model.__table__.columns[key].type, String):
                stmt = stmt.where(getattr(self.model, key) == value)
            else:
                residual[key] = value

        if sort:
            field = sort.lstrip("-")
            if field in self._columns:
                col = getattr(self.model, field)
                stmt = stmt.order_by(col.desc().nulls_last() if sort.startswith("-") else col.asc().nulls_last())

        rows = db.execute(stmt).scalars().all()
        if residual:
            rows = [r for r in rows if all(self._value(r, k) == v for k, v in residual.items())]
        return rows

    def _value(self, record, key: str):
        if key in self._columns and getattr(record, key) is not None:
            return getattr(record, key)
        return (record.attributes or {}).get(key)

    def get(self, db: Session, record_id: str, tenant_id: str):
        """Fetch one record by id, only if it belongs to ``tenant_id``"""
        stmt = select(self.model).where(self.model.id == record_id, self.model.tenant_id == tenant_id)
        return db.execute(stmt).scalars().first()

    def create(self, db: Session, data: Dict[str, Any]):
        columns, attributes = self._split(data)
        columns.setdefault("status", None)
        if columns["status"] is None:
            columns["status"] = self.model.DEFAULT_STATUS
        record = self.model(attributes=attributes, **columns)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    def update(self, db: Session, record_id: str, data: Dict[str, Any], tenant_id: str):
        """Apply ``data`` to a record owned by ``tenant_id``.

        Returns None when no such record exists in that tenant. The tenant
        of a record never changes through an update.
        """
        record = self.get(db, record_id, tenant_id)
        if record is None:
            return None
        columns, attributes = self._split({k: v for k, v in data.items() if k != "tenant_id"})
        merged = dict(record.attributes or {})
        for key, value in columns.items():
            if key == "status" and value is None:
                continue
            setattr(record, key, value)
            merged.pop(key, None)
        merged.update(attributes)
        if merged != (record.attributes or {}):
            # reassign so the JSON column is flagged dirty
            record.attributes = merged
        db.commit()
        db.refresh(record)
        return record


class ApiKeyStore:
    """Lookup and bookkeeping for API key records"""

    def find_active(self, db: Session, key_hash: str, tenant_id: str) -> Optional[ApiKey]:
        stmt = select(ApiKey).where(
            ApiKey.key_hash == key_hash,
            ApiKey.tenant_id == tenant_id,
            ApiKey.is_active.is_(True),
        )
        return db.execute(stmt).scalars().first()

    def touch(self, db: Session, key: ApiKey, now: Optional[datetime] = None) -> None:
        """Record ``last_used``. Concurrent touches race; last write wins."""
        key.last_used = now or datetime.now(timezone.utc)
        db.commit()


api_key_store = ApiKeyStore()
