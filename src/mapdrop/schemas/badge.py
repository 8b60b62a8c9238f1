"""Badge-related Pydantic schemas."""

from pydantic import BaseModel


class BadgeRuleResponse(BaseModel):
    """One entry of the badge catalog."""

    badge_id: str
    title: str
    description: str


class BadgeCheckResponse(BaseModel):
    """Badges granted by the latest evaluation."""

    new_badges: list[str]
