# mypy: ignore-errors
"""Tests for the badge evaluator."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from mapdrop.models import UserBadge
from mapdrop.services import badges, ledger
from mapdrop.services.errors import ConflictError, NotFoundError


def test_ten_locations_grant_explorer_once(db_session, test_user, make_location) -> None:
    for _ in range(10):
        make_location(test_user)

    assert badges.evaluate(db_session, test_user.id) == ["locations_10"]
    assert badges.evaluate(db_session, test_user.id) == []
    assert test_user.badge_ids == ["locations_10"]


def test_nothing_to_grant_for_new_user(db_session, test_user) -> None:
    assert badges.evaluate(db_session, test_user.id) == []
    assert db_session.query(UserBadge).count() == 0


def test_nine_locations_are_not_enough(db_session, test_user, make_location) -> None:
    for _ in range(9):
        make_location(test_user)

    assert badges.evaluate(db_session, test_user.id) == []


def test_totals_are_recounted_from_the_ledger(db_session, make_user, test_user, make_location) -> None:
    mine = make_location(test_user)
    # A stale cached counter must not earn anything.
    mine.upvotes = 500
    mine.total_points = 500
    db_session.commit()

    voters = [make_user() for _ in range(3)]
    for voter in voters:
        ledger.cast_vote(db_session, voter.id, mine.id, "up")
    ledger.cast_vote(db_session, test_user.id, mine.id, "down")

    totals = badges.collect_totals(db_session, test_user)

    assert totals.locations_created == 1
    assert totals.upvotes_received == 3
    assert totals.downvotes_received == 1
    assert totals.net_votes_received == 2
    assert totals.votes_cast == 1
    assert badges.evaluate(db_session, test_user.id) == []


def test_votes_cast_badge(db_session, make_user, other_user, test_user, make_location) -> None:
    for _ in range(10):
        ledger.cast_vote(db_session, test_user.id, make_location(other_user).id, "up")

    assert badges.evaluate(db_session, test_user.id) == ["votes_cast_10"]


def test_several_rules_granted_in_rule_order(db_session, make_user) -> None:
    rich = make_user(credits=150)
    from mapdrop.models import Location

    for _ in range(10):
        db_session.add(Location(creator_id=rich.id, latitude=0.0, longitude=0.0, text=""))
    db_session.commit()

    assert badges.evaluate(db_session, rich.id) == ["locations_10", "credits_100"]
    assert rich.badge_ids == ["locations_10", "credits_100"]


def test_previously_held_badges_are_skipped(db_session, test_user, make_location) -> None:
    db_session.add(UserBadge(user_id=test_user.id, badge_id="locations_10"))
    db_session.commit()
    for _ in range(10):
        make_location(test_user)

    assert badges.evaluate(db_session, test_user.id) == []


def test_grant_race_keeps_nothing_and_retry_succeeds(db_session, test_user, make_location) -> None:
    for _ in range(10):
        make_location(test_user)

    failure = IntegrityError("INSERT INTO user_badge", {}, Exception("uq_user_badge"))
    with patch.object(db_session, "commit", side_effect=failure):
        with pytest.raises(ConflictError):
            badges.evaluate(db_session, test_user.id)

    assert db_session.query(UserBadge).count() == 0
    assert badges.evaluate(db_session, test_user.id) == ["locations_10"]


def test_unknown_user(db_session) -> None:
    with pytest.raises(NotFoundError):
        badges.evaluate(db_session, 424242)


def test_rule_table_identifiers_are_unique() -> None:
    ids = [rule.badge_id for rule in badges.BADGE_RULES]
    assert len(ids) == len(set(ids))
    assert set(ids) == set(badges.RULES_BY_ID)


def test_rule_predicates_on_totals() -> None:
    totals = badges.ActivityTotals(upvotes_received=60, downvotes_received=5)
    satisfied = [rule.badge_id for rule in badges.BADGE_RULES if rule.predicate(totals)]
    assert satisfied == ["upvotes_received_50"]
