"""Tests for the RollbackAttempt aggregate."""

import pytest

from tidemark.domain.entities.rollback import RollbackAttempt, RollbackStatus
from tidemark.domain.events import (
    RollbackConfirmedEvent,
    RollbackFailedEvent,
    RollbackRejectedEvent,
    RollbackRequestedEvent,
    RollbackSubmittedEvent,
    RollbackValidatedEvent,
)


class TestRollbackAttempt:
    def test_request_starts_in_requested(self):
        attempt = RollbackAttempt.request("svc", "Intrepid-Class", "bad deploy")

        assert attempt.status == RollbackStatus.REQUESTED
        assert attempt.message == "bad deploy"
        assert len(attempt.domain_events) == 1
        assert isinstance(attempt.domain_events[0], RollbackRequestedEvent)
        assert not attempt.is_terminal

    def test_success_path(self):
        attempt = (
            RollbackAttempt.request("svc", "Intrepid-Class")
            .validate()
            .submit()
            .confirm("galactic_mission_alpha")
        )

        assert attempt.status == RollbackStatus.CONFIRMED
        assert attempt.new_deployment_id == "galactic_mission_alpha"
        assert attempt.is_terminal
        assert [type(e) for e in attempt.domain_events] == [
            RollbackRequestedEvent,
            RollbackValidatedEvent,
            RollbackSubmittedEvent,
            RollbackConfirmedEvent,
        ]

    def test_transitions_do_not_modify_original(self):
        requested = RollbackAttempt.request("svc", "x")
        validated = requested.validate()

        assert requested.status == RollbackStatus.REQUESTED
        assert validated.status == RollbackStatus.VALIDATED
        assert len(requested.domain_events) == 1

    def test_reject_from_requested(self):
        attempt = RollbackAttempt.request("svc", "").reject("empty id")

        assert attempt.status == RollbackStatus.REJECTED
        assert attempt.error_message == "empty id"
        assert isinstance(attempt.domain_events[-1], RollbackRejectedEvent)

    def test_fail_after_submit(self):
        attempt = RollbackAttempt.request("svc", "x").validate().submit().fail("boom")

        assert attempt.status == RollbackStatus.FAILED
        assert attempt.error_message == "boom"
        assert isinstance(attempt.domain_events[-1], RollbackFailedEvent)

    def test_fail_after_validate(self):
        attempt = RollbackAttempt.request("svc", "x").validate().fail("unknown id")
        assert attempt.status == RollbackStatus.FAILED

    def test_cannot_submit_before_validate(self):
        with pytest.raises(ValueError, match="VALIDATED"):
            RollbackAttempt.request("svc", "x").submit()

    def test_cannot_confirm_before_submit(self):
        with pytest.raises(ValueError, match="SUBMITTED"):
            RollbackAttempt.request("svc", "x").validate().confirm("new")

    def test_cannot_reject_after_validate(self):
        with pytest.raises(ValueError, match="REQUESTED"):
            RollbackAttempt.request("svc", "x").validate().reject("late")

    def test_cannot_fail_from_requested(self):
        with pytest.raises(ValueError):
            RollbackAttempt.request("svc", "x").fail("nope")

    def test_cannot_leave_terminal_state(self):
        confirmed = RollbackAttempt.request("svc", "x").validate().submit().confirm("y")
        with pytest.raises(ValueError):
            confirmed.fail("after the fact")

    def test_events_carry_service_as_aggregate_id(self):
        attempt = RollbackAttempt.request("svc", "x").validate()
        assert all(e.aggregate_id == "svc" for e in attempt.domain_events)
        assert attempt.domain_events[1].to_dict()["event_type"] == "RollbackValidatedEvent"
