"""Vote-related endpoints for the MapDrop API."""

from fastapi import APIRouter, status

from mapdrop.api.v1.dependencies import CurrentUserDep, SessionDep
from mapdrop.schemas.vote import MyVoteResponse, VoteCreate, VoteResponse
from mapdrop.services import ledger
from mapdrop.services.locations import get_location

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=VoteResponse)
async def cast_vote(
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Cast or switch the caller's vote on a location."""
    outcome = ledger.cast_vote(db, current_user.id, vote_data.location_id, vote_data.direction)
    location = outcome.location
    return VoteResponse(
        location_id=location.id,
        previous_direction=outcome.previous_direction,
        applied_direction=outcome.applied_direction,
        changed=outcome.changed,
        upvotes=location.upvotes,
        downvotes=location.downvotes,
        total_points=location.upvotes - location.downvotes,
        verification_status=location.verification_status,
        previous_status=outcome.previous_status,
    )


@router.get("/{location_id}/my-vote", response_model=MyVoteResponse)
async def get_my_vote(
    location_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVoteResponse:
    """Get current user's vote on a specific location."""
    get_location(db, location_id)
    return MyVoteResponse(direction=ledger.get_vote_direction(db, current_user.id, location_id))
