"""PolicyRepository row mapping, exercised without a database."""

import logging
from datetime import UTC, datetime

from tenancy.infrastructure.persistence.models import RbacPolicy
from tenancy.infrastructure.persistence.repositories import PolicyRepository

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


class _Result:
    def __init__(self, rows) -> None:
        self._rows = rows

    def scalars(self):
        return self

    def all(self):
        return list(self._rows)


class _Session:
    def __init__(self, rows) -> None:
        self._rows = rows

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc) -> None:
        return None

    async def execute(self, stmt):
        return _Result(self._rows)


def _policy(policy_id: str, resource: str, conditions) -> RbacPolicy:
    return RbacPolicy(
        id=policy_id,
        role="OrderOps",
        resource=resource,
        actions=["read"],
        conditions=conditions,
        version=1,
        effective_from=EPOCH,
        effective_until=None,
    )


async def test_unparseable_conditions_skip_only_that_row(caplog) -> None:
    rows = [
        _policy("p1", "order", [{"kind": "regex", "pattern": ".*"}]),
        _policy("p2", "product", [{"kind": "field_equals", "field": "region", "value": "EU"}]),
        _policy("p3", "customer", "region=EU"),
    ]
    repo = PolicyRepository(lambda: _Session(rows))

    with caplog.at_level(logging.ERROR):
        policies = await repo.list_effective(EPOCH)

    assert [p.id for p in policies] == ["p2"]
    assert policies[0].conditions.evaluate({"region": "EU"}) is True
    assert "Skipping policy p1" in caplog.text
    assert "Skipping policy p3" in caplog.text
