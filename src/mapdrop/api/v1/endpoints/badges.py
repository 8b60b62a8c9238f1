"""Badge catalog and evaluation endpoints."""

from fastapi import APIRouter

from mapdrop.api.v1.dependencies import CurrentUserDep, SessionDep
from mapdrop.schemas.badge import BadgeCheckResponse, BadgeRuleResponse
from mapdrop.services import badges

router = APIRouter(prefix="/badges", tags=["badges"])


@router.get("/", response_model=list[BadgeRuleResponse])
async def list_badges() -> list[BadgeRuleResponse]:
    """Return every badge that can be earned."""
    return [
        BadgeRuleResponse(badge_id=rule.badge_id, title=rule.title, description=rule.description)
        for rule in badges.BADGE_RULES
    ]


@router.post("/check", response_model=BadgeCheckResponse)
async def check_badges(current_user: CurrentUserDep, db: SessionDep) -> BadgeCheckResponse:
    """Evaluate the caller's activity and grant any newly earned badges."""
    return BadgeCheckResponse(new_badges=badges.evaluate(db, current_user.id))
