"""RBAC policy ORM model: grants a role a set of actions on a resource."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from tenancy.infrastructure.persistence.database import Base
from tenancy.infrastructure.persistence.models.mixins import CuidMixin


class RbacPolicy(CuidMixin, Base):
    """Policy row. Table: rbac_policy.

    resource and actions may contain '*'. conditions holds tagged
    predicates (see tenancy.domain.value_objects.conditions). A row is
    effective while effective_from <= now < effective_until (or no end).
    """

    __tablename__ = "rbac_policy"

    role: Mapped[str] = mapped_column(String, nullable=False)
    resource: Mapped[str] = mapped_column(String, nullable=False)
    actions: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=False
    )
    conditions: Mapped[Any | None] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    effective_from: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    effective_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_rbac_policy_role_resource", "role", "resource"),
        Index("ix_rbac_policy_window", "effective_from", "effective_until"),
    )
