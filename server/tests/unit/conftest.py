# server/tests/unit/conftest.py
# ─────────────────────────────────────────────────────────────────────────────
# Conftest pour les TESTS UNITAIRES.
#
# Objectifs :
# - Fournir des stores en mémoire (ports SampleStore / AlertStore /
#   ActuatorRegistry) avec injection de pannes (`fail_next`).
# - Fournir des générateurs d'ECG déterministes (trains de pics, ECG
#   synthétique avec ondes T et dérive de ligne de base).
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import math

import pytest

from app.domain.errors import StoreUnavailable

SAMPLING_RATE_HZ = 250.0


class _FailingMixin:
    """`fail_next = N` : les N prochaines écritures lèvent StoreUnavailable."""

    name = "fake"

    def __init__(self):
        self.fail_next = 0
        self.write_calls = 0

    def _maybe_fail(self):
        self.write_calls += 1
        if self.fail_next > 0:
            self.fail_next -= 1
            raise StoreUnavailable(f"{self.name} unavailable")


class FakeSampleStore(_FailingMixin):
    name = "iot_data"

    def __init__(self):
        super().__init__()
        self.rows = {}

    def put(self, sample):
        self._maybe_fail()
        self.rows[(sample.subject_id, sample.timestamp)] = sample

    def latest(self, subject_id):
        mine = [s for (sid, _), s in self.rows.items() if sid == subject_id]
        return max(mine, key=lambda s: s.timestamp) if mine else None

    def history(self, subject_id):
        # ordre d'insertion (pas trié) : le QueryService doit trier lui-même
        return [s for (sid, _), s in self.rows.items() if sid == subject_id]


class FakeAlertStore(_FailingMixin):
    name = "alerts"

    def __init__(self):
        super().__init__()
        self.rows = {}

    def put(self, record):
        self._maybe_fail()
        self.rows[(record.subject_id, record.timestamp)] = record

    def for_subject(self, subject_id):
        return [r for (sid, _), r in self.rows.items() if sid == subject_id]


class FakeActuatorRegistry(_FailingMixin):
    name = "buzzer_control"

    def __init__(self):
        super().__init__()
        self.states = {}

    def set(self, state, *, only_if_newer=False):
        self._maybe_fail()
        current = self.states.get(state.device_id)
        if only_if_newer and current is not None and current.timestamp > state.timestamp:
            return False
        self.states[state.device_id] = state
        return True

    def get(self, device_id):
        return self.states.get(device_id)


@pytest.fixture
def sample_store():
    return FakeSampleStore()


@pytest.fixture
def alert_store():
    return FakeAlertStore()


@pytest.fixture
def actuator_registry():
    return FakeActuatorRegistry()


# ----------------------------------------------------------------------------
# ECG déterministes
# ----------------------------------------------------------------------------
def spike_ecg(spacing: int, beats: int = 4, *, lead: int = 20, amplitude: float = 1.0) -> list[float]:
    """Ligne plate + un pic d'un échantillon tous les `spacing` échantillons."""
    length = lead + spacing * (beats - 1) + lead
    x = [0.0] * length
    for i in range(beats):
        x[lead + i * spacing] = amplitude
    return x


def synthetic_ecg(bpm: int, seconds: float = 10.0, fs: float = SAMPLING_RATE_HZ) -> list[float]:
    """
    ECG synthétique : complexes R gaussiens étroits, ondes T plus larges et
    plus basses, dérive lente de ligne de base. Aucun aléa.
    """
    n = int(seconds * fs)
    spacing = fs * 60.0 / bpm
    r_centers = [spacing / 2 + k * spacing for k in range(int(n / spacing))]
    out = []
    for i in range(n):
        v = 0.05 * math.sin(2 * math.pi * 0.3 * i / fs)
        for c in r_centers:
            d = i - c
            if abs(d) < 40:
                v += math.exp(-(d * d) / (2 * 4.0 ** 2))
            dt_ = i - (c + 0.3 * fs)
            if abs(dt_) < 60:
                v += 0.3 * math.exp(-(dt_ * dt_) / (2 * 12.0 ** 2))
        out.append(v)
    return out


@pytest.fixture
def ecg_45bpm():
    # 333 échantillons à 250 Hz => 45.05 bpm => 45
    return spike_ecg(333)


@pytest.fixture
def ecg_75bpm():
    # 200 échantillons à 250 Hz => 75 bpm
    return spike_ecg(200)


@pytest.fixture
def payload_factory(ecg_75bpm):
    def _factory(**overrides):
        data = {
            "deviceId": "D1",
            "subjectId": "M1",
            "temperature": 37.0,
            "ecg": list(ecg_75bpm),
            "timestamp": 1000,
        }
        data.update(overrides)
        return data
    return _factory


@pytest.fixture
def make_spike_ecg():
    return spike_ecg


@pytest.fixture
def make_synthetic_ecg():
    return synthetic_ecg
