"""Global test configuration.

Shared payload builders for deployment records in the shapes the remote
service returns.
"""

import pytest


def listing_payload(
    deployment_id: str,
    number: int,
    created_on: str,
    author: str = "Jean-Luc-Picard@federation.org",
    source: str = "wrangler",
    **extra,
) -> dict:
    payload = {
        "id": deployment_id,
        "number": number,
        "metadata": {
            "author_id": "Picard-Gamma-6-0-7-3",
            "author_email": author,
            "source": source,
            "created_on": created_on,
            "modified_on": created_on,
        },
    }
    payload.update(extra)
    return payload


@pytest.fixture
def starship_history_payloads():
    return [
        listing_payload("Galaxy-Class", 1, "2021-01-01T00:00:00.000000Z"),
        listing_payload(
            "Intrepid-Class",
            2,
            "2021-02-02T00:00:00.000000Z",
            author="Kathryn-Janeway@federation.org",
        ),
    ]


@pytest.fixture
def rollback_confirmation_payload():
    return {
        "created_on": "2222-11-18T16:40:48.50545Z",
        "modified_on": "2222-01-20T18:08:47.464024Z",
        "id": "space_craft_1",
        "tag": "alien_tech_001",
        "tags": ["hyperdrive", "laser_cannons", "shields"],
        "deployment_id": "galactic_mission_alpha",
        "logpush": True,
        "etag": "13a3240e8fb414561b0366813b0b8f42b3e6cfa0d9e70e99835dae83d0d8a794",
        "handlers": ["interstellar_communication", "hyperspace_navigation"],
        "last_deployed_from": "spaceport_alpha",
        "usage_model": "intergalactic",
        "script": "addEventListener('interstellar_communication', event => {})",
        "size": "1 light-year",
    }
