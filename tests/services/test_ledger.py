# mypy: ignore-errors
"""Tests for the vote ledger."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from mapdrop.models import LocationVote
from mapdrop.models.location import STATUS_FLAGGED, STATUS_NORMAL, STATUS_VERIFIED
from mapdrop.services import ledger
from mapdrop.services.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)


def _assert_consistent(location) -> None:
    assert location.total_points == location.upvotes - location.downvotes


def test_first_vote_records_and_counts(db_session, other_user, test_location) -> None:
    outcome = ledger.cast_vote(db_session, other_user.id, test_location.id, "up")

    assert outcome.previous_direction is None
    assert outcome.applied_direction == "up"
    assert outcome.changed is True
    assert (outcome.location.upvotes, outcome.location.downvotes) == (1, 0)
    assert outcome.location.total_points == 1
    assert db_session.query(LocationVote).count() == 1


def test_same_direction_twice_does_not_double_count(db_session, other_user, test_location) -> None:
    ledger.cast_vote(db_session, other_user.id, test_location.id, "down")
    outcome = ledger.cast_vote(db_session, other_user.id, test_location.id, "down")

    assert outcome.changed is False
    assert outcome.previous_direction == "down"
    assert outcome.applied_direction == "down"
    assert (outcome.location.upvotes, outcome.location.downvotes) == (0, 1)
    assert outcome.location.total_points == -1
    assert db_session.query(LocationVote).count() == 1


@pytest.mark.parametrize(("first", "second", "delta"), [("up", "down", -2), ("down", "up", 2)])
def test_switching_direction_moves_points_by_two(
    db_session, other_user, test_location, first, second, delta
) -> None:
    before = ledger.cast_vote(db_session, other_user.id, test_location.id, first).location.total_points

    outcome = ledger.cast_vote(db_session, other_user.id, test_location.id, second)

    assert outcome.previous_direction == first
    assert outcome.applied_direction == second
    assert outcome.location.total_points - before == delta
    assert outcome.location.upvotes + outcome.location.downvotes == 1
    assert db_session.query(LocationVote).count() == 1


def test_points_stay_consistent_across_many_voters(db_session, make_user, test_location) -> None:
    directions = ["up", "down", "up", "up", "down", "down", "down", "up", "down"]
    for direction in directions:
        voter = make_user()
        outcome = ledger.cast_vote(db_session, voter.id, test_location.id, direction)
        _assert_consistent(outcome.location)

    assert test_location.upvotes == directions.count("up")
    assert test_location.downvotes == directions.count("down")


def test_flag_scenario(db_session, make_user, test_user, test_location) -> None:
    outcome = ledger.cast_vote(db_session, make_user().id, test_location.id, "up")
    assert outcome.location.total_points == 1
    assert outcome.location.verification_status == STATUS_NORMAL

    for _ in range(5):
        outcome = ledger.cast_vote(db_session, make_user().id, test_location.id, "down")
    assert outcome.location.total_points == -4
    assert outcome.location.verification_status == STATUS_NORMAL

    outcome = ledger.cast_vote(db_session, make_user().id, test_location.id, "down")
    assert outcome.location.total_points == -5
    assert outcome.location.verification_status == STATUS_NORMAL
    assert outcome.previous_status is None

    outcome = ledger.cast_vote(db_session, make_user().id, test_location.id, "down")
    assert outcome.location.total_points == -6
    assert outcome.location.verification_status == STATUS_FLAGGED
    assert outcome.previous_status == STATUS_NORMAL


def test_verification_happens_once(db_session, make_user, test_location, monkeypatch) -> None:
    from mapdrop.core.settings import settings

    monkeypatch.setattr(settings, "pending_threshold", 2)
    monkeypatch.setattr(settings, "verification_threshold", 3)

    transitions = []
    for _ in range(5):
        outcome = ledger.cast_vote(db_session, make_user().id, test_location.id, "up")
        if outcome.previous_status is not None:
            transitions.append((outcome.previous_status, outcome.location.verification_status))

    assert transitions == [("normal", "pending"), ("pending", "verified")]
    assert test_location.verification_status == STATUS_VERIFIED


def test_unknown_location_is_not_found(db_session, other_user) -> None:
    with pytest.raises(NotFoundError):
        ledger.cast_vote(db_session, other_user.id, 99999, "up")


def test_unknown_user_is_unauthorized(db_session, test_location) -> None:
    with pytest.raises(UnauthorizedError):
        ledger.cast_vote(db_session, 99999, test_location.id, "up")
    with pytest.raises(UnauthorizedError):
        ledger.cast_vote(db_session, None, test_location.id, "up")


@pytest.mark.parametrize("direction", ["sideways", "", None, 1])
def test_malformed_direction_is_rejected(db_session, other_user, test_location, direction) -> None:
    with pytest.raises(InvalidInputError):
        ledger.cast_vote(db_session, other_user.id, test_location.id, direction)
    assert db_session.query(LocationVote).count() == 0


def test_serialization_failure_leaves_counters_untouched(db_session, other_user, test_location) -> None:
    failure = OperationalError("UPDATE locations", {}, Exception("could not serialize access"))
    with patch.object(db_session, "commit", side_effect=failure):
        with pytest.raises(ConflictError):
            ledger.cast_vote(db_session, other_user.id, test_location.id, "up")

    db_session.expire_all()
    assert db_session.query(LocationVote).count() == 0
    db_session.refresh(test_location)
    assert (test_location.upvotes, test_location.downvotes, test_location.total_points) == (0, 0, 0)


def test_get_vote_direction(db_session, other_user, test_location) -> None:
    assert ledger.get_vote_direction(db_session, other_user.id, test_location.id) is None
    ledger.cast_vote(db_session, other_user.id, test_location.id, "down")
    assert ledger.get_vote_direction(db_session, other_user.id, test_location.id) == "down"
