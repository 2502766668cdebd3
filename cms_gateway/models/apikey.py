from sqlalchemy import Column, String, DateTime, Boolean, JSON, UniqueConstraint, func
from cms_gateway.db import Base


class ApiKey(Base):
    __tablename__ = "api_keys"
    key_id = Column(String(32), primary_key=True)
    name = Column(String(128), nullable=False, default="")
    tenant_id = Column(String(64), index=True, nullable=False)
    key_hash = Column(String(128), nullable=False)           # sha256 of the secret
    permissions = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    last_used = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        # same secret under two tenants is two principals
        UniqueConstraint("tenant_id", "key_hash", name="uq_api_keys_tenant_hash"),
    )

    def to_dict(self):
        """Convert to dictionary for admin listings (never includes the secret)"""
        return {
            "key_id": self.key_id,
            "name": self.name,
            "tenant_id": self.tenant_id,
            "permissions": list(self.permissions or []),
            "is_active": self.is_active,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "last_used": self.last_used.isoformat() if self.last_used else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
