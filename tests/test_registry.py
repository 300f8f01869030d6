"""StatusRegistry tests: snapshot wire form, updated timestamp, identity, transition logging."""

import logging
import time
import uuid
from datetime import datetime

from zpages.core.state.enums import HealthStatus, ReadinessStatus, ServiceType
from zpages.status.registry import StatusRegistry


class TestSnapshot:
    def test_wire_form(self, registry):
        body = registry.snapshot().to_wire()
        assert body["guid"] == "0729a580-2240-11e6-9eb5-0002a5d5c51b"
        assert body["name"] == "data-store"
        assert body["type"] == "platform"
        assert body["healthStatus"] == {"status": "ok"}
        assert body["readinessStatus"] == {"status": "ready"}
        assert body["uri"] == "http://data-store.local:8080"
        assert "upstreamServices" not in body
        # RFC 3339
        assert datetime.fromisoformat(body["updated"].replace("Z", "+00:00")).tzinfo is not None

    def test_upstream_services_serialized_when_present(self, registry):
        child = StatusRegistry(name="cache", uri="http://cache:6379", service_type=ServiceType.INFRASTRUCTURE)
        parent = StatusRegistry(
            name="api",
            uri="http://api:8080",
            upstream_services=[child.snapshot()],
        )
        body = parent.snapshot().to_wire()
        assert len(body["upstreamServices"]) == 1
        assert body["upstreamServices"][0]["name"] == "cache"
        assert body["upstreamServices"][0]["type"] == "infrastructure"

    def test_reflects_forced_states(self, registry):
        registry.health.set_unhealthy()
        registry.readiness.set_not_ready_forced()
        snap = registry.snapshot()
        assert snap.health.status == HealthStatus.FAILED_FORCED
        assert snap.readiness.status == ReadinessStatus.NOT_READY_FORCED

    def test_explicit_status_overrides_read(self, registry):
        snap = registry.snapshot(health=HealthStatus.OK_FORCED)
        assert snap.health.status == HealthStatus.OK_FORCED
        assert snap.readiness.status == ReadinessStatus.READY


def test_guid_generated_when_missing():
    reg = StatusRegistry(name="svc", uri="http://svc:1")
    uuid.UUID(reg.guid)
    assert reg.service_type == ServiceType.APPLICATION


def test_updated_refreshed_on_mutation(registry):
    before = registry.updated
    time.sleep(0.01)
    registry.health.set_unhealthy()
    assert registry.updated > before


def test_probes_are_independent(registry):
    registry.readiness.set_not_ready_forced()
    assert registry.health.observe() == HealthStatus.OK
    registry.health.set_unhealthy()
    assert registry.readiness.observe() == ReadinessStatus.NOT_READY_FORCED


def test_transition_logged_with_identity(registry, log_context, caplog):
    with caplog.at_level(logging.INFO, logger="zpages"):
        registry.readiness.set_not_ready_forced()
    messages = [r.getMessage() for r in caplog.records if r.getMessage().startswith("status_transition")]
    assert len(messages) == 1
    msg = messages[0]
    assert "probe=readiness" in msg
    assert "from_status=ready" in msg
    assert "to_status=not-ready-forced" in msg
    assert "guid=0729a580-2240-11e6-9eb5-0002a5d5c51b" in msg
    assert "app=zpages" in msg
