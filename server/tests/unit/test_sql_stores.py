# server/tests/unit/test_sql_stores.py
"""
Stores SQL (SQLite in-memory via conftest) : upserts idempotents, ordre des
lectures, last-write-wins buzzer, traduction des erreurs en StoreUnavailable.
"""
from contextlib import contextmanager

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.domain.errors import StoreUnavailable
from app.domain.models import ActuatorState, AlertRecord, VitalSample
from app.infrastructure.persistence.database.models.sample import Sample
from app.infrastructure.persistence.stores import SqlActuatorRegistry, SqlAlertStore, SqlSampleStore

pytestmark = pytest.mark.unit


def _sample(ts, subject="M1", **kw):
    data = dict(
        device_id="D1",
        subject_id=subject,
        temperature_c=38.0,
        ecg=[0.0, 1.0, 0.25, -0.5],
        timestamp=ts,
        heart_rate_bpm=45,
        alert=True,
    )
    data.update(kw)
    return VitalSample(**data)


def test_sample_round_trip():
    store = SqlSampleStore()
    store.put(_sample(1000))
    got = store.latest("M1")
    assert got == _sample(1000)


def test_sample_same_key_overwrites(Session):
    store = SqlSampleStore()
    store.put(_sample(1000, temperature_c=37.0, alert=False))
    store.put(_sample(1000, temperature_c=38.2))

    with Session() as s:
        count = s.scalar(select(func.count()).select_from(Sample).where(Sample.subject_id == "M1"))
    assert count == 1
    assert store.latest("M1").temperature_c == 38.2


def test_sample_history_ascending_and_latest_max():
    store = SqlSampleStore()
    for ts in (3000, 1000, 2000):
        store.put(_sample(ts))
    store.put(_sample(9999, subject="other"))

    assert [s.timestamp for s in store.history("M1")] == [1000, 2000, 3000]
    assert store.latest("M1").timestamp == 3000
    assert store.latest("nobody") is None
    assert store.history("nobody") == []


def test_alert_store_newest_first():
    store = SqlAlertStore()
    for ts in (1000, 3000, 2000):
        store.put(AlertRecord.from_sample(_sample(ts)))
    records = store.for_subject("M1")
    assert [r.timestamp for r in records] == [3000, 2000, 1000]
    assert all(r.reason == "ecg_and_temp_alert" and r.alert for r in records)


def test_actuator_last_write_wins():
    reg = SqlActuatorRegistry()
    assert reg.get("D1") is None
    reg.set(ActuatorState(device_id="D1", buzzer="on", reason="ecg_and_temp_alert", timestamp=2000))
    reg.set(ActuatorState(device_id="D1", buzzer="off", reason="normal", timestamp=1000))
    state = reg.get("D1")
    assert (state.buzzer, state.reason, state.timestamp) == ("off", "normal", 1000)


def test_actuator_only_if_newer_keeps_fresher_command():
    reg = SqlActuatorRegistry()
    reg.set(ActuatorState(device_id="D1", buzzer="off", reason="normal", timestamp=2000))
    written = reg.set(
        ActuatorState(device_id="D1", buzzer="on", reason="ecg_and_temp_alert", timestamp=1000),
        only_if_newer=True,
    )
    assert written is False
    assert reg.get("D1").buzzer == "off"


def test_database_errors_become_store_unavailable():
    @contextmanager
    def _broken_sessions():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))
        yield  # pragma: no cover

    with pytest.raises(StoreUnavailable):
        SqlSampleStore(session_factory=_broken_sessions).put(_sample(1000))
    with pytest.raises(StoreUnavailable):
        SqlAlertStore(session_factory=_broken_sessions).for_subject("M1")
    with pytest.raises(StoreUnavailable):
        SqlActuatorRegistry(session_factory=_broken_sessions).get("D1")


def test_unconvertible_timestamp_becomes_store_unavailable():
    reg = SqlActuatorRegistry()
    with pytest.raises(StoreUnavailable):
        reg.set(ActuatorState(device_id="D1", buzzer="on", reason="ecg_and_temp_alert", timestamp=10**15))
    assert reg.get("D1") is None


def test_actuator_conversion_failure_is_deferred_by_gateway(monkeypatch, payload_factory, sample_store, alert_store):
    from app.application.services.ingestion_service import IngestionGateway
    from app.application.services.vital_signs_service import VitalSignAnalyzer
    from app.infrastructure.persistence.repositories import actuator_repository

    def _out_of_range(ms):
        raise ValueError("year is out of range")

    monkeypatch.setattr(actuator_repository, "ms_to_datetime", _out_of_range)
    deferred = []
    gw = IngestionGateway(
        samples=sample_store,
        alerts=alert_store,
        actuators=SqlActuatorRegistry(),
        analyzer=VitalSignAnalyzer(sampling_rate_hz=250.0),
        retry_attempts=1,
        retry_backoff_seconds=0,
        defer=lambda step, record: deferred.append(step),
    )

    result = gw.ingest(payload_factory())
    assert result.accepted is True
    assert result.completed_steps == ["sample"]
    assert result.deferred_steps == ["actuator"]
    assert deferred == ["actuator"]
