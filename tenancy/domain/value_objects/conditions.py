"""Policy condition predicates.

Conditions gate a policy on the request context. They are explicit tagged
predicates combined conjunctively; a policy whose conditions do not hold is
skipped (not a denial). Adding a new condition kind means adding a new
predicate class and registering it in _PREDICATE_KINDS.

Stored form (JSON column on rbac_policy) is either the tagged list::

    [{"kind": "field_equals", "field": "region", "value": "EU"}]

or the legacy flat map ``{"region": "EU"}``, which is read as one
field_equals predicate per key.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class FieldEquals:
    """Holds when context[field] exists and equals value."""

    KIND: ClassVar[str] = "field_equals"

    field: str
    value: Any

    def __post_init__(self) -> None:
        if not isinstance(self.field, str) or not self.field:
            raise ValueError("Condition field must be a non-empty string")

    def evaluate(self, context: Mapping[str, Any] | None) -> bool:
        if context is None or self.field not in context:
            return False
        return context[self.field] == self.value

    def to_json(self) -> dict[str, Any]:
        return {"kind": self.KIND, "field": self.field, "value": self.value}

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> FieldEquals:
        if "field" not in raw or "value" not in raw:
            raise ValueError("field_equals condition requires 'field' and 'value'")
        return cls(field=raw["field"], value=raw["value"])


ConditionPredicate = FieldEquals

_PREDICATE_KINDS: dict[str, type[FieldEquals]] = {
    FieldEquals.KIND: FieldEquals,
}


@dataclass(frozen=True)
class PolicyConditions:
    """Conjunction of predicates. Empty conditions always hold."""

    predicates: tuple[ConditionPredicate, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.predicates

    def evaluate(self, context: Mapping[str, Any] | None) -> bool:
        """Return True if every predicate holds against context."""
        return all(p.evaluate(context) for p in self.predicates)

    def to_json(self) -> list[dict[str, Any]] | None:
        """Serialize to the tagged list form; None when empty."""
        if self.is_empty:
            return None
        return [p.to_json() for p in self.predicates]

    @classmethod
    def from_json(cls, raw: Any) -> PolicyConditions:
        """Parse stored conditions (tagged list, legacy map, or null).

        Raises:
            ValueError: If raw is not a supported shape or names an unknown kind.
        """
        if raw is None:
            return cls()
        if isinstance(raw, Mapping):
            return cls(
                tuple(FieldEquals(field=str(k), value=v) for k, v in raw.items())
            )
        if isinstance(raw, list):
            predicates: list[ConditionPredicate] = []
            for item in raw:
                if not isinstance(item, Mapping):
                    raise ValueError("Each condition must be an object")
                kind = item.get("kind")
                predicate_cls = _PREDICATE_KINDS.get(kind)
                if predicate_cls is None:
                    raise ValueError(f"Unknown condition kind: {kind!r}")
                predicates.append(predicate_cls.from_json(item))
            return cls(tuple(predicates))
        raise ValueError(
            f"Conditions must be a list, an object or null, got {type(raw).__name__}"
        )
