"""Tests for the active deployment resolver."""

import random
from datetime import datetime, timedelta, UTC

import pytest

from tidemark.domain.entities.deployment import (
    DeploymentHistory,
    DeploymentRecord,
    parse_timestamp,
)
from tidemark.domain.exceptions import NoActiveDeploymentError
from tidemark.domain.services.active_resolver import resolve_active


def _record(deployment_id, number, created):
    return DeploymentRecord(
        id=deployment_id,
        number=number,
        created_at=parse_timestamp(created),
        author="crew@federation.org",
        source="wrangler",
    )


def _random_records(seed: int) -> list[DeploymentRecord]:
    rng = random.Random(seed)
    size = rng.randint(1, 40)
    numbers = rng.sample(range(0, 1000), size)
    start = datetime(2021, 1, 1, tzinfo=UTC)
    return [
        DeploymentRecord(
            id=f"deploy-{seed}-{n}",
            number=n,
            created_at=start + timedelta(minutes=rng.randint(0, 100000)),
            author="crew@federation.org",
            source=rng.choice(["wrangler", "api", "dashboard"]),
        )
        for n in numbers
    ]


class TestResolveActive:
    def test_starship_history_resolves_latest(self):
        history = DeploymentHistory(
            [
                _record("Galaxy-Class", 1, "2021-01-01T00:00:00Z"),
                _record("Intrepid-Class", 2, "2021-02-02T00:00:00Z"),
            ]
        )
        assert resolve_active(history).id == "Intrepid-Class"

    def test_empty_history_raises(self):
        with pytest.raises(NoActiveDeploymentError, match="never been deployed"):
            resolve_active(DeploymentHistory(), service_name="svc")

    def test_explicit_active_id_wins(self):
        history = DeploymentHistory(
            [
                _record("Galaxy-Class", 1, "2021-01-01T00:00:00Z"),
                _record("Intrepid-Class", 2, "2021-02-02T00:00:00Z"),
            ]
        )
        assert resolve_active(history, active_id="Galaxy-Class").id == "Galaxy-Class"

    def test_unknown_active_id_falls_back_to_latest(self):
        history = DeploymentHistory(
            [
                _record("Galaxy-Class", 1, "2021-01-01T00:00:00Z"),
                _record("Intrepid-Class", 2, "2021-02-02T00:00:00Z"),
            ]
        )
        assert resolve_active(history, active_id="Defiant").id == "Intrepid-Class"

    def test_accepts_plain_sequences_in_any_order(self):
        records = [
            _record("b", 7, "2021-01-01T00:00:00Z"),
            _record("a", 3, "2021-06-01T00:00:00Z"),
        ]
        assert resolve_active(records).id == "b"

    def test_deterministic(self):
        records = _random_records(7)
        assert resolve_active(records) is resolve_active(list(records))

    @pytest.mark.parametrize("seed", range(50))
    def test_fallback_is_max_number(self, seed):
        records = _random_records(seed)
        active = resolve_active(DeploymentHistory(records))

        assert active.number == max(r.number for r in records)
        assert active in records
