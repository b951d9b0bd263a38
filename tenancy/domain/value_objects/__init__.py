"""Domain value objects."""

from tenancy.domain.value_objects.conditions import (
    ConditionPredicate,
    FieldEquals,
    PolicyConditions,
)

__all__ = [
    "ConditionPredicate",
    "FieldEquals",
    "PolicyConditions",
]
