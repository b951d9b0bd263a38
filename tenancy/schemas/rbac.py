"""Schemas for role assignments, policies and access checks."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from tenancy.application.dtos.rbac import PolicyResult
from tenancy.domain.enums import Action, Resource, Role
from tenancy.domain.value_objects import PolicyConditions


class RoleAssignmentCreate(BaseModel):
    """Assign a role to a user in the current tenant (or another, for GlobalAdmin)."""

    user_id: str = Field(..., min_length=1, max_length=255)
    role: Role
    email: EmailStr | None = None
    tenant_id: str | None = Field(
        default=None, description="Defaults to the resolved tenant"
    )


class RoleAssignmentUpdate(BaseModel):
    role: Role


class RoleAssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    tenant_id: str | None
    role: str
    email: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleAssignmentListResponse(BaseModel):
    users: list[RoleAssignmentResponse]
    count: int


class _ConditionsField(BaseModel):
    conditions: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None,
        description='Tagged predicates, e.g. [{"kind": "field_equals", "field": "region", "value": "EU"}]',
    )

    @field_validator("conditions")
    @classmethod
    def parse_conditions(cls, value: Any) -> Any:
        # Unknown kinds and bad shapes surface as 422 here.
        PolicyConditions.from_json(value)
        return value

    def parsed_conditions(self) -> PolicyConditions | None:
        if "conditions" not in self.model_fields_set:
            return None
        return PolicyConditions.from_json(self.conditions)


class PolicyCreateRequest(_ConditionsField):
    role: Role
    resource: Resource
    actions: list[Action] = Field(..., min_length=1)
    effective_from: datetime | None = None
    effective_until: datetime | None = None


class PolicyUpdateRequest(_ConditionsField):
    role: Role | None = None
    resource: Resource | None = None
    actions: list[Action] | None = None
    effective_until: datetime | None = None


class PolicyResponse(BaseModel):
    id: str
    role: str
    resource: str
    actions: list[str]
    conditions: list[dict[str, Any]] | None = None
    version: int
    effective_from: datetime
    effective_until: datetime | None = None

    @classmethod
    def from_result(cls, policy: PolicyResult) -> "PolicyResponse":
        return cls(
            id=policy.id,
            role=policy.role,
            resource=policy.resource,
            actions=list(policy.actions),
            conditions=policy.conditions.to_json(),
            version=policy.version,
            effective_from=policy.effective_from,
            effective_until=policy.effective_until,
        )


class PolicyListResponse(BaseModel):
    policies: list[PolicyResponse]
    count: int


class AccessCheckRequest(BaseModel):
    """Diagnostic permission check. user_id other than the caller requires GlobalAdmin."""

    resource: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1)
    context: dict[str, Any] | None = None
    user_id: str | None = None


class AccessCheckResponse(BaseModel):
    user_id: str
    tenant_id: str
    resource: str
    action: str
    allowed: bool
    reason: str | None = None


class CacheStatsResponse(BaseModel):
    size: int
    keys: list[str]


class CacheClearResponse(BaseModel):
    cleared: int
