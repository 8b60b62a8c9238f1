# mypy: ignore-errors
"""Tests for the point aggregator."""

from mapdrop.models import LocationVote
from mapdrop.models.vote import VOTE_DOWN, VOTE_UP
from mapdrop.services.points import Tally, refresh_points, tally, total_points


def test_total_points_may_go_negative() -> None:
    assert total_points(0, 0) == 0
    assert total_points(3, 1) == 2
    assert total_points(1, 7) == -6


def test_tally_counts_ledger_rows(db_session, make_user, test_location) -> None:
    voters = [make_user() for _ in range(5)]
    for voter, direction in zip(voters, [VOTE_UP, VOTE_UP, VOTE_UP, VOTE_DOWN, VOTE_DOWN]):
        db_session.add(
            LocationVote(location_id=test_location.id, voter_user_id=voter.id, direction=direction)
        )

    assert tally(db_session, test_location.id) == Tally(upvotes=3, downvotes=2)
    assert tally(db_session, test_location.id).total_points == 1


def test_tally_of_location_without_votes(db_session, test_location) -> None:
    assert tally(db_session, test_location.id) == Tally(upvotes=0, downvotes=0)


def test_refresh_points_repairs_drifted_counters(db_session, make_user, test_location) -> None:
    voter = make_user()
    db_session.add(
        LocationVote(location_id=test_location.id, voter_user_id=voter.id, direction=VOTE_DOWN)
    )
    test_location.upvotes = 40
    test_location.total_points = 40

    delta = refresh_points(db_session, test_location)

    assert delta == -41
    assert (test_location.upvotes, test_location.downvotes, test_location.total_points) == (0, 1, -1)


def test_refresh_points_is_idempotent(db_session, make_user, test_location) -> None:
    voter = make_user()
    db_session.add(
        LocationVote(location_id=test_location.id, voter_user_id=voter.id, direction=VOTE_UP)
    )

    assert refresh_points(db_session, test_location) == 1
    assert refresh_points(db_session, test_location) == 0
    assert test_location.total_points == 1
