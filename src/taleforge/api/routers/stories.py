"""Stories router for story generation and listing.

Every endpoint requires a bearer token and only ever touches the caller's
own stories.
"""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from taleforge.api.deps import CurrentUserId, StoryServiceDep

router = APIRouter()


# =============================================================================
# Schemas
# =============================================================================


class StoryCreateRequest(BaseModel):
    """Request to create a new story."""

    title: str = ""
    hints: str = ""
    genres: list[str] = Field(default_factory=list)


class StoryResponse(BaseModel):
    """Story information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    hints: str
    genres: list[str]
    content: str
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=StoryResponse)
async def create_story(
    body: StoryCreateRequest,
    user_id: CurrentUserId,
    stories: StoryServiceDep,
) -> StoryResponse:
    """Generate and save a story owned by the caller.

    Raises:
        InputValidationError: If title, hints or genres are missing (400)
    """
    story = await stories.create_story(
        owner_id=user_id,
        title=body.title,
        hints=body.hints,
        genres=body.genres,
    )
    return StoryResponse.model_validate(story)


@router.get("", response_model=list[StoryResponse])
async def list_stories(
    user_id: CurrentUserId,
    stories: StoryServiceDep,
) -> list[StoryResponse]:
    """List the caller's stories, newest first."""
    return [StoryResponse.model_validate(s) for s in await stories.list_stories(user_id)]
