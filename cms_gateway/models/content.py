"""
Tenant-scoped content records served through the gateway
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, JSON, Index
from cms_gateway.db import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentRecord:
    """Columns shared by every content table.

    Anything a caller sends that is not a column lands in ``attributes`` and
    is flattened back into the record by ``to_dict``.
    """

    id = Column(String(32), primary_key=True, default=_new_id)
    tenant_id = Column(String(64), index=True, nullable=False)
    slug = Column(String(255), nullable=True)
    status = Column(String(32), nullable=False)
    attributes = Column(JSON, nullable=False, default=dict)
    created_date = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_date = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    # store-managed, never taken from caller data
    RESERVED_FIELDS = frozenset({"id", "attributes", "created_date", "updated_date"})

    @classmethod
    def column_names(cls) -> set:
        return {c.name for c in cls.__table__.columns}

    def to_dict(self) -> dict:
        record = dict(self.attributes or {})
        for column in self.__table__.columns:
            if column.name == "attributes":
                continue
            value = getattr(self, column.name)
            if value is None and column.name in record:
                # non-string value parked in attributes by the store
                continue
            if isinstance(value, datetime):
                value = value.isoformat()
            record[column.name] = value
        return record


class Page(ContentRecord, Base):
    __tablename__ = "cms_pages"
    DEFAULT_STATUS = "draft"

    title = Column(String(255), nullable=True)

    __table_args__ = (Index("ix_cms_pages_tenant_slug", "tenant_id", "slug"),)


class Product(ContentRecord, Base):
    __tablename__ = "cms_products"
    DEFAULT_STATUS = "draft"

    name = Column(String(255), nullable=True)

    __table_args__ = (Index("ix_cms_products_tenant_slug", "tenant_id", "slug"),)


class BlogPost(ContentRecord, Base):
    __tablename__ = "cms_blog_posts"
    DEFAULT_STATUS = "draft"

    title = Column(String(255), nullable=True)
    publish_date = Column(String(40), nullable=True)  # ISO-8601, sorts lexically

    __table_args__ = (
        Index("ix_cms_blog_posts_tenant_slug", "tenant_id", "slug"),
        Index("ix_cms_blog_posts_publish_date", "publish_date"),
    )


class Form(ContentRecord, Base):
    __tablename__ = "cms_forms"
    DEFAULT_STATUS = "active"

    name = Column(String(255), nullable=True)
    success_message = Column(Text, nullable=True)

    __table_args__ = (Index("ix_cms_forms_tenant_slug", "tenant_id", "slug"),)


class FormSubmission(ContentRecord, Base):
    __tablename__ = "cms_form_submissions"
    DEFAULT_STATUS = "new"

    form_id = Column(String(32), index=True, nullable=True)
    form_name = Column(String(255), nullable=True)
    data = Column(JSON, nullable=True)

    __table_args__ = (Index("ix_cms_form_submissions_tenant_created", "tenant_id", "created_date"),)
