"""Story creation and owner-scoped listing.

Stories are generated by a fixed template, not a model: the same title and
hints always produce the same content.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taleforge.models.story import Story

from .errors import InputValidationError, StoreUnavailableError

logger = logging.getLogger(__name__)

HINTS_PREVIEW_LENGTH = 250
MISSING_STORY_FIELDS_MESSAGE = "Title, hints and at least one genre required"


def render_story_content(title: str, hints: str) -> str:
    """Render story text from a title and the leading part of the hints.

    Args:
        title: Story title, embedded verbatim
        hints: Free-text hints, truncated to HINTS_PREVIEW_LENGTH characters

    Returns:
        Generated story content
    """
    return f"In a world where {hints[:HINTS_PREVIEW_LENGTH]}... (auto-generated story for {title})"


class StoryService:
    """Service for a user's stories. Every query is scoped to one owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_story(
        self,
        owner_id: int,
        title: str,
        hints: str,
        genres: Iterable[str],
    ) -> Story:
        """Validate input, generate content and persist the story.

        Args:
            owner_id: Authenticated user ID, becomes the story owner
            title: Story title
            hints: Free-text hints for the generator
            genres: Genre tags, order preserved

        Returns:
            The stored story with ID and timestamps

        Raises:
            InputValidationError: If title, hints or genres are missing
            StoreUnavailableError: If the database fails
        """
        title = title or ""
        hints = hints or ""
        genre_list = list(genres or [])

        missing = []
        if not title:
            missing.append("title")
        if not hints:
            missing.append("hints")
        if not genre_list:
            missing.append("genres")
        if missing:
            raise InputValidationError(MISSING_STORY_FIELDS_MESSAGE, fields=missing)

        story = Story(
            user_id=owner_id,
            title=title,
            hints=hints,
            genres=genre_list,
            content=render_story_content(title, hints),
        )
        try:
            self.db.add(story)
            await self.db.commit()
            await self.db.refresh(story)
        except SQLAlchemyError as e:
            logger.exception("Failed to save story for user id=%s", owner_id)
            raise StoreUnavailableError() from e

        logger.info("Created story id=%s for user id=%s", story.id, owner_id)
        return story

    async def list_stories(self, owner_id: int) -> list[Story]:
        """List the owner's stories, newest first."""
        try:
            result = await self.db.execute(
                select(Story)
                .where(Story.user_id == owner_id)
                .order_by(Story.created_at.desc(), Story.id.desc())
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to list stories for user id=%s", owner_id)
            raise StoreUnavailableError() from e
        return list(result.scalars().all())
