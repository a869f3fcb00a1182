"""Shared pytest fixtures for all test files."""

import os
import tempfile
from datetime import datetime, timezone

import pytest

from collision_claims.db.database import MemoryKeyValueStore, init_db
from collision_claims.models.claim import (
    Claim,
    DamageArea,
    DamageAssessment,
    DamageSeverity,
    DetectedDamage,
    Part,
    Photo,
    PhotoAngle,
    RepairType,
    User,
    UserRole,
    Vehicle,
)
from collision_claims.utils.random_source import reset_random


class SequenceRandom:
    """Random source that replays fixed values, cycling when exhausted."""

    def __init__(self, *values: float):
        self._values = list(values) or [0.5]
        self._index = 0
        self.calls = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        self.calls += 1
        return value


@pytest.fixture(autouse=True)
def temp_db():
    """Use a temporary SQLite DB for tests."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_db(path)
    prev = os.environ.get("CLAIMS_DB_PATH")
    os.environ["CLAIMS_DB_PATH"] = path
    try:
        yield path
    finally:
        if prev is None:
            os.environ.pop("CLAIMS_DB_PATH", None)
        else:
            os.environ["CLAIMS_DB_PATH"] = prev
        try:
            os.unlink(path)
        except OSError:
            pass


@pytest.fixture(autouse=True)
def seeded_random():
    """Seed the process-wide random source so unseeded calls are repeatable."""
    reset_random(1234)
    yield
    reset_random(None)


@pytest.fixture
def make_rng():
    """Factory for SequenceRandom: make_rng(0.5) or make_rng(0.1, 0.9, ...)."""
    return SequenceRandom


@pytest.fixture
def memory_store():
    return MemoryKeyValueStore()


@pytest.fixture
def now():
    return datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def customer():
    return User(
        id="user-1",
        email="driver@example.com",
        company_name="John Doe",
        role=UserRole.CUSTOMER,
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def camry():
    return Vehicle(year=2022, make="Toyota", model="Camry")


@pytest.fixture
def four_angle_photos(now):
    angles = [
        PhotoAngle.FRONT,
        PhotoAngle.REAR,
        PhotoAngle.DRIVER_SIDE,
        PhotoAngle.PASSENGER_SIDE,
    ]
    return [
        Photo(id=f"p{i}", uri=f"file:///photos/{a.value}.jpg", angle=a, timestamp=now)
        for i, a in enumerate(angles)
    ]


def make_damage(
    area: DamageArea = DamageArea.FRONT_BUMPER,
    severity: DamageSeverity = DamageSeverity.MODERATE,
    repair_type: RepairType = RepairType.REPAIR,
    confidence: float = 0.9,
    parts: list[Part] | None = None,
) -> DetectedDamage:
    if parts is None:
        parts = [
            Part(
                id=f"{area.value}-part",
                name="Front Bumper Cover",
                price=450,
                labor_hours=2.0,
                repair_type=repair_type,
            )
        ]
    return DetectedDamage(
        id=f"{area.value}-dmg",
        area=area,
        severity=severity,
        confidence=confidence,
        affected_parts=parts,
        repair_type=repair_type,
    )


@pytest.fixture
def damage_factory():
    return make_damage


@pytest.fixture
def assessment(damage_factory):
    """Two-damage assessment: moderate front bumper repair, severe rear bumper replace."""
    return DamageAssessment(
        detected_damages=[
            damage_factory(DamageArea.FRONT_BUMPER, DamageSeverity.MODERATE, RepairType.REPAIR),
            damage_factory(
                DamageArea.REAR_BUMPER,
                DamageSeverity.SEVERE,
                RepairType.REPLACE,
                confidence=0.6,
                parts=[
                    Part(id="rb1", name="Rear Bumper Cover", price=420, labor_hours=3.0),
                    Part(id="rb2", name="Bumper Reinforcement", price=180, labor_hours=2.5),
                ],
            ),
        ],
        confidence=0.8,
    )


@pytest.fixture
def claim_factory(now, camry):
    def _make(**overrides) -> Claim:
        data = {
            "id": "claim-1",
            "user_id": "user-1",
            "vehicle": camry,
            "created_at": now,
            "updated_at": now,
        }
        data.update(overrides)
        return Claim(**data)

    return _make
