"""Profile ingestion: validate a name against the directory and store it."""

from __future__ import annotations

import structlog

from faceoff.core.errors import DuplicateProfileError, InvalidRequestError, ProfileNotFoundError
from faceoff.models import Category, Profile
from faceoff.services.storage import ProfileRepository

from .client import DirectoryClient

logger = structlog.get_logger()


class IngestionService:
    """Create profiles for characters known to the external directory."""

    def __init__(self, repository: ProfileRepository, directory: DirectoryClient) -> None:
        self._repository = repository
        self._directory = directory

    async def add_profile(self, name: str | None, category: Category | str | None) -> Profile:
        """Look up ``name`` in the directory and store a new profile.

        Args:
            name: Character name as typed by the user.
            category: Pairing category for the new profile.

        Returns:
            The stored profile.

        Raises:
            InvalidRequestError: If name or category is missing or invalid.
            ProfileNotFoundError: If the directory does not know the name.
            DuplicateProfileError: If the character is already stored.
            DirectoryLookupError: If the directory fails.
        """
        name = (name or "").strip()
        if not name:
            msg = "A character name is required"
            raise InvalidRequestError(msg)
        try:
            category = Category(category)
        except ValueError as e:
            choices = ", ".join(c.value for c in Category)
            msg = f"Category must be one of: {choices}"
            raise InvalidRequestError(msg) from e

        character_id = await self._directory.lookup_id(name)
        if character_id is None:
            raise ProfileNotFoundError(message=f"{name} is not a registered citizen of New Eden.")

        existing = await self._repository.get_by_id(character_id)
        if existing is not None:
            raise DuplicateProfileError(character_id, existing.name)

        info = await self._directory.character_info(character_id)
        if info is None:
            raise ProfileNotFoundError(message=f"{name} is not a registered citizen of New Eden.")

        profile = await self._repository.add(
            Profile(
                id=info.character_id,
                name=info.name or name,
                category=category,
                race=info.race,
                bloodline=info.bloodline,
            )
        )
        logger.info("profile_added", profile=profile.id, name=profile.name)
        return profile
