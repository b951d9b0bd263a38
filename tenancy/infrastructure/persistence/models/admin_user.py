"""Role assignment ORM model (admin_user): links a user to a tenant with a role."""

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from tenancy.infrastructure.persistence.database import Base
from tenancy.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class AdminUser(CuidMixin, TimestampMixin, Base):
    """Role assignment. Table: admin_user. Unique (user_id, tenant_id).

    A second assignment for the same pair supersedes the role instead of
    adding a row. Revocation flips is_active; rows are kept.
    """

    __tablename__ = "admin_user"

    user_id: Mapped[str] = mapped_column(String, nullable=False)
    tenant_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="RESTRICT"), nullable=True
    )
    role: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

    __table_args__ = (
        UniqueConstraint("user_id", "tenant_id", name="uq_admin_user_user_tenant"),
        Index("ix_admin_user_user_active", "user_id", "is_active"),
        Index("ix_admin_user_tenant_active", "tenant_id", "is_active"),
    )
