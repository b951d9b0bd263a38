"""Tenant ORM model. Root entity of the tenant hierarchy."""

from typing import Any

from sqlalchemy import JSON, CheckConstraint, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from tenancy.domain.enums import TenantStatus
from tenancy.infrastructure.persistence.database import Base
from tenancy.infrastructure.persistence.models.mixins import TimestampMixin


class Tenant(TimestampMixin, Base):
    """Tenant. Table: tenant. id is a human-chosen slug (e.g. 'hq', 'paris').

    Never deleted: deactivation sets status to 'inactive'.
    """

    __tablename__ = "tenant"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    default_locale: Mapped[str] = mapped_column(String, nullable=False, default="en")
    currency_code: Mapped[str] = mapped_column(String, nullable=False, default="eur")
    domain: Mapped[str | None] = mapped_column(String, nullable=True, unique=True, index=True)
    subdomain: Mapped[str | None] = mapped_column(
        String, nullable=True, unique=True, index=True
    )
    capabilities: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=TenantStatus.ACTIVE.value, index=True
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(
                ", ".join(
                    "'{}'".format(v.replace("'", "''"))
                    for v in TenantStatus.values()
                )
            ),
            name="tenant_status_check",
        ),
    )
