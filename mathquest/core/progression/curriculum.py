# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum catalogue.

The catalogue lists chapters in unlock order with their activities and
mastery passing score. It ships as YAML inside the package and can be
overlaid by a deployment file: the overlay is deep-merged onto the packaged
catalogue, so it only needs the fields it changes.

Example:
    >>> curriculum = load_curriculum()
    >>> curriculum.first().id
    'fractions'
    >>> curriculum.next_chapter("fractions").id
    'decimals'
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mathquest.core.config.yaml_loader import YAMLLoadError, load_layered
from mathquest.core.progression.exceptions import CurriculumError, UnknownChapterError
from mathquest.core.progression.models import MIN_PASSING_SCORE, DifficultyTier

logger = logging.getLogger(__name__)

DEFAULT_CURRICULUM_PATH = Path(__file__).parent / "data" / "curriculum.yaml"


class Activity(BaseModel):
    """A practice activity inside a chapter."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    difficulty: DifficultyTier = DifficultyTier.MEDIUM


class Chapter(BaseModel):
    """A curriculum chapter.

    Attributes:
        id: Chapter identifier, e.g. "fractions".
        name: Display name.
        order: Unlock position, starting at 1.
        icon: Display icon.
        description: Short description.
        activities: Activities in display order.
        passing_score: Mastery quiz percentage needed to unlock the next
            chapter, at least 80; None uses the configured default.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    order: int = Field(ge=1)
    icon: str = ""
    description: str = ""
    activities: tuple[Activity, ...] = ()
    passing_score: int | None = Field(default=None, ge=MIN_PASSING_SCORE, le=100)

    @property
    def activity_ids(self) -> list[str]:
        """Activity ids in display order."""
        return [activity.id for activity in self.activities]


class Curriculum:
    """Ordered, validated chapter catalogue.

    Chapter ids and orders are unique, and orders run 1..n without gaps so
    that "next chapter" is always ``order + 1``.
    """

    def __init__(self, chapters: list[Chapter]) -> None:
        """Initialize the catalogue.

        Args:
            chapters: Chapters in any order.

        Raises:
            CurriculumError: If the catalogue is empty, has duplicate ids,
                or its orders are not 1..n.
        """
        if not chapters:
            raise CurriculumError("Curriculum must contain at least one chapter")

        ordered = sorted(chapters, key=lambda chapter: chapter.order)

        ids = [chapter.id for chapter in ordered]
        if len(set(ids)) != len(ids):
            raise CurriculumError(
                "Duplicate chapter ids in curriculum",
                details={"chapter_ids": ids},
            )

        orders = [chapter.order for chapter in ordered]
        if orders != list(range(1, len(ordered) + 1)):
            raise CurriculumError(
                "Chapter orders must run 1..n without gaps",
                details={"orders": orders},
            )

        self._chapters: tuple[Chapter, ...] = tuple(ordered)
        self._by_id = {chapter.id: chapter for chapter in ordered}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Curriculum":
        """Build a curriculum from its YAML mapping form.

        Expects ``{"chapters": {<id>: {..., "activities": {<id>: {...}}}}}``.

        Raises:
            CurriculumError: If the mapping is malformed.
        """
        raw_chapters = data.get("chapters")
        if not isinstance(raw_chapters, dict):
            raise CurriculumError("Curriculum must define a 'chapters' mapping")

        chapters = []
        for chapter_id, raw in raw_chapters.items():
            if not isinstance(raw, dict):
                raise CurriculumError(
                    f"Chapter '{chapter_id}' must be a mapping",
                    details={"chapter_id": chapter_id},
                )
            raw_activities = raw.get("activities") or {}
            try:
                activities = tuple(
                    Activity(id=activity_id, **(activity or {}))
                    for activity_id, activity in raw_activities.items()
                )
                fields = {k: v for k, v in raw.items() if k != "activities"}
                chapters.append(
                    Chapter(id=chapter_id, activities=activities, **fields)
                )
            except (ValidationError, TypeError, AttributeError) as e:
                raise CurriculumError(
                    f"Invalid chapter '{chapter_id}': {e}",
                    details={"chapter_id": chapter_id},
                ) from e

        return cls(chapters)

    @property
    def chapters(self) -> tuple[Chapter, ...]:
        """Chapters in unlock order."""
        return self._chapters

    def chapter_ids(self) -> list[str]:
        return [chapter.id for chapter in self._chapters]

    def get(self, chapter_id: str) -> Chapter:
        """Get a chapter by id.

        Raises:
            UnknownChapterError: If the id is not in the catalogue.
        """
        try:
            return self._by_id[chapter_id]
        except KeyError:
            raise UnknownChapterError(chapter_id) from None

    def __contains__(self, chapter_id: object) -> bool:
        return chapter_id in self._by_id

    def __len__(self) -> int:
        return len(self._chapters)

    def first(self) -> Chapter:
        return self._chapters[0]

    def next_chapter(self, chapter_id: str) -> Chapter | None:
        """Chapter unlocked by mastering ``chapter_id``; None after the last."""
        index = self.get(chapter_id).order
        if index >= len(self._chapters):
            return None
        return self._chapters[index]

    def previous_chapter(self, chapter_id: str) -> Chapter | None:
        """Chapter whose mastery unlocks ``chapter_id``; None for the first."""
        order = self.get(chapter_id).order
        if order <= 1:
            return None
        return self._chapters[order - 2]

    def has_activity(self, chapter_id: str, activity_id: str) -> bool:
        """Check whether an activity belongs to a chapter."""
        return activity_id in self.get(chapter_id).activity_ids


def load_curriculum(overlay_path: Path | None = None) -> Curriculum:
    """Load the packaged curriculum, optionally overlaid by another file.

    Args:
        overlay_path: YAML file deep-merged onto the packaged catalogue; a
            ``null`` value in it removes the key (for example an activity).

    Returns:
        Validated Curriculum.

    Raises:
        CurriculumError: If a file cannot be read or the result is invalid.
    """
    overlays = [overlay_path] if overlay_path is not None else []
    try:
        data = load_layered(DEFAULT_CURRICULUM_PATH, *overlays)
    except YAMLLoadError as e:
        raise CurriculumError(str(e), details={"path": str(e.path)}) from e
    if overlays:
        logger.info("Curriculum overlay applied from %s", overlay_path)

    curriculum = Curriculum.from_dict(data)
    logger.debug("Curriculum loaded: %s", curriculum.chapter_ids())
    return curriculum


@lru_cache(maxsize=1)
def get_default_curriculum() -> Curriculum:
    """Get the cached packaged curriculum."""
    return load_curriculum()
