"""Unit tests for AuditRecorder and MutationAuditHook."""

import asyncio
import logging

import pytest

from tenancy.application.dtos.audit_log import AuditLogEntryCreate, AuditLogQuery
from tenancy.application.dtos.rbac import AccessDecision
from tenancy.application.services import AuditRecorder, MutationAuditHook
from tenancy.domain.enums import AuditAction, AuditResource


@pytest.fixture
def recorder(audit_repo) -> AuditRecorder:
    return AuditRecorder(audit_repo)


def _entry(**overrides) -> AuditLogEntryCreate:
    values = {
        "tenant_id": "hq",
        "user_id": "u1",
        "action": AuditAction.UPDATE,
        "resource": AuditResource.USER,
        "resource_id": "u2",
        "metadata": None,
    }
    values.update(overrides)
    return AuditLogEntryCreate(**values)


async def test_top_level_password_is_redacted(recorder, audit_repo) -> None:
    await recorder.record(_entry(metadata={"password": "hunter2", "name": "Ada"}))
    stored = audit_repo.entries[0]
    assert stored.metadata == {"password": "[REDACTED]", "name": "Ada"}
    assert "hunter2" not in repr(stored)


async def test_nested_secrets_are_redacted_by_default(recorder, audit_repo) -> None:
    metadata = {
        "changes": {"email": "a@b.c", "Password-Hash": "x", "cards": [{"cvv": "123"}]},
        "api_key": "k",
    }
    await recorder.record(_entry(metadata=metadata))
    stored = audit_repo.entries[0].metadata
    assert stored == {
        "changes": {"email": "a@b.c", "Password-Hash": "[REDACTED]", "cards": [{"cvv": "[REDACTED]"}]},
        "api_key": "[REDACTED]",
    }
    # Input untouched
    assert metadata["changes"]["Password-Hash"] == "x"


async def test_shallow_redaction_leaves_nested_values(audit_repo) -> None:
    recorder = AuditRecorder(audit_repo, recursive_redaction=False, redaction_marker="***")
    await recorder.record(
        _entry(metadata={"token": "t", "changes": {"password": "p"}})
    )
    assert audit_repo.entries[0].metadata == {"token": "***", "changes": {"password": "p"}}


async def test_enum_action_and_resource_are_stored_as_strings(recorder, audit_repo) -> None:
    await recorder.record(_entry())
    stored = audit_repo.entries[0]
    assert stored.action == "update"
    assert stored.resource == "user"


async def test_record_never_raises_on_write_failure(recorder, audit_repo, caplog) -> None:
    audit_repo.fail = True
    with caplog.at_level(logging.WARNING):
        await recorder.record(_entry())
    assert audit_repo.entries == []
    assert "Failed to write audit entry: update user in tenant hq" in caplog.text


async def test_disabled_recorder_writes_nothing(audit_repo) -> None:
    recorder = AuditRecorder(audit_repo, enabled=False)
    await recorder.record(_entry())
    recorder.submit(_entry())
    assert recorder.pending_count == 0
    assert audit_repo.entries == []


async def test_submit_runs_in_background_and_drain_waits(recorder, audit_repo) -> None:
    recorder.submit(_entry(resource_id="a"))
    recorder.submit(_entry(resource_id="b"))
    assert recorder.pending_count == 2
    await recorder.drain(timeout=1)
    assert sorted(e.resource_id for e in audit_repo.entries) == ["a", "b"]
    assert recorder.pending_count == 0


async def test_drain_cancels_writes_past_timeout(audit_repo) -> None:
    started = asyncio.Event()

    class SlowRepo:
        async def create(self, entry):
            started.set()
            await asyncio.sleep(60)

    recorder = AuditRecorder(SlowRepo())
    recorder.submit(_entry())
    await started.wait()
    await recorder.drain(timeout=0.01)
    assert recorder.pending_count == 0


async def test_list_is_tenant_scoped_newest_first(recorder, audit_repo) -> None:
    for rid in ("1", "2", "3"):
        await recorder.record(_entry(resource_id=rid))
    await recorder.record(_entry(tenant_id="paris", resource_id="p"))

    page = await recorder.list(AuditLogQuery(tenant_id="hq", limit=2, offset=0))
    assert [e.resource_id for e in page] == ["3", "2"]
    assert await recorder.count(AuditLogQuery(tenant_id="hq")) == 3
    history = await recorder.list_for_resource("hq", "user", "1")
    assert [e.resource_id for e in history] == ["1"]
    assert await recorder.list_user_activity("paris", "u1") != []


def _hook(recorder) -> MutationAuditHook:
    return MutationAuditHook(
        recorder,
        tenant_id="hq",
        user_id="admin",
        ip_address="10.0.0.1",
        user_agent="pytest",
        method="POST",
        path="/api/v1/admin/users",
    )


async def test_hook_records_committed_mutation_with_transport_metadata(
    recorder, audit_repo
) -> None:
    hook = _hook(recorder)
    hook.note_access(AccessDecision(allowed=True), "user", "create")
    hook.committed(
        AuditAction.CREATE,
        AuditResource.USER,
        "u9",
        changes={"email": "u9@example.com", "password": "pw"},
        status_code=201,
    )
    await recorder.drain()

    stored = audit_repo.entries[0]
    assert stored.ip_address == "10.0.0.1"
    assert stored.user_agent == "pytest"
    assert stored.metadata == {
        "status_code": 201,
        "method": "POST",
        "path": "/api/v1/admin/users",
        "rbac_check": {"resource": "user", "action": "create", "allowed": True},
        "changes": {"email": "u9@example.com", "password": "[REDACTED]"},
    }


@pytest.mark.parametrize("status_code", [400, 403, 404, 500])
async def test_hook_skips_unsuccessful_outcomes(recorder, audit_repo, status_code) -> None:
    _hook(recorder).committed(AuditAction.UPDATE, AuditResource.USER, status_code=status_code)
    await recorder.drain()
    assert audit_repo.entries == []


def test_changes_only_kept_for_create_and_update(recorder) -> None:
    hook = _hook(recorder)
    deleted = hook.build_entry(AuditAction.DELETE, AuditResource.USER, "u2", changes={"a": 1})
    updated = hook.build_entry(AuditAction.UPDATE, AuditResource.USER, "u2", changes={"a": 1})
    assert "changes" not in deleted.metadata
    assert updated.metadata["changes"] == {"a": 1}
    assert "rbac_check" not in updated.metadata
