# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the curriculum catalogue."""

from pathlib import Path

import pytest

from mathquest.core.progression import (
    Chapter,
    Curriculum,
    CurriculumError,
    DifficultyTier,
    UnknownChapterError,
    load_curriculum,
)


class TestPackagedCurriculum:
    """Tests for the curriculum shipped with the package."""

    def test_chapter_order(self, curriculum: Curriculum) -> None:
        assert curriculum.chapter_ids() == [
            "fractions",
            "decimals",
            "percentages",
            "number-sense",
        ]

    def test_every_chapter_has_five_activities(self, curriculum: Curriculum) -> None:
        assert all(len(chapter.activities) == 5 for chapter in curriculum.chapters)

    def test_activity_difficulty(self, curriculum: Curriculum) -> None:
        fractions = curriculum.get("fractions")

        assert fractions.activity_ids[0] == "equivalent-matcher"
        assert fractions.activities[0].difficulty == DifficultyTier.EASY

    def test_navigation(self, curriculum: Curriculum) -> None:
        """Test next and previous chapter lookups."""
        assert curriculum.first().id == "fractions"
        assert curriculum.next_chapter("fractions").id == "decimals"
        assert curriculum.next_chapter("number-sense") is None
        assert curriculum.previous_chapter("decimals").id == "fractions"
        assert curriculum.previous_chapter("fractions") is None

    def test_unknown_chapter(self, curriculum: Curriculum) -> None:
        with pytest.raises(UnknownChapterError) as exc_info:
            curriculum.get("algebra")

        assert exc_info.value.chapter_id == "algebra"
        assert "algebra" not in curriculum

    def test_has_activity(self, curriculum: Curriculum) -> None:
        assert curriculum.has_activity("fractions", "number-line")
        assert not curriculum.has_activity("fractions", "rounding")


class TestCurriculumValidation:
    """Tests for catalogue validation."""

    def test_empty_rejected(self) -> None:
        with pytest.raises(CurriculumError):
            Curriculum([])

    def test_duplicate_ids_rejected(self) -> None:
        chapters = [
            Chapter(id="fractions", name="Fractions", order=1),
            Chapter(id="fractions", name="Fractions again", order=2),
        ]

        with pytest.raises(CurriculumError, match="Duplicate"):
            Curriculum(chapters)

    def test_gap_in_orders_rejected(self) -> None:
        chapters = [
            Chapter(id="fractions", name="Fractions", order=1),
            Chapter(id="decimals", name="Decimals", order=3),
        ]

        with pytest.raises(CurriculumError, match="1..n"):
            Curriculum(chapters)

    def test_chapters_sorted_by_order(self) -> None:
        curriculum = Curriculum(
            [
                Chapter(id="decimals", name="Decimals", order=2),
                Chapter(id="fractions", name="Fractions", order=1),
            ]
        )

        assert curriculum.chapter_ids() == ["fractions", "decimals"]

    def test_from_dict_requires_chapters(self) -> None:
        with pytest.raises(CurriculumError, match="chapters"):
            Curriculum.from_dict({"units": {}})

    def test_from_dict_invalid_chapter(self) -> None:
        with pytest.raises(CurriculumError, match="fractions"):
            Curriculum.from_dict({"chapters": {"fractions": {"name": "Fractions"}}})

    def test_chapter_passing_score_below_bar_rejected(self) -> None:
        with pytest.raises(ValueError):
            Chapter(id="fractions", name="Fractions", order=1, passing_score=50)

    def test_chapter_passing_score_above_bar_accepted(self) -> None:
        chapter = Chapter(id="fractions", name="Fractions", order=1, passing_score=95)

        assert chapter.passing_score == 95


class TestLoadCurriculum:
    """Tests for load_curriculum with an overlay file."""

    def test_overlay_changes_single_field(self, tmp_path: Path) -> None:
        """Test that an overlay only needs the fields it changes."""
        overlay = tmp_path / "curriculum.yaml"
        overlay.write_text(
            "chapters:\n"
            "  fractions:\n"
            "    passing_score: 90\n"
            "    name: Fun with Fractions\n"
        )

        curriculum = load_curriculum(overlay)
        fractions = curriculum.get("fractions")

        assert fractions.passing_score == 90
        assert fractions.name == "Fun with Fractions"
        assert len(fractions.activities) == 5

    def test_overlay_adds_chapter(self, tmp_path: Path) -> None:
        overlay = tmp_path / "curriculum.yaml"
        overlay.write_text(
            "chapters:\n"
            "  ratios:\n"
            "    name: Ratios\n"
            "    order: 5\n"
            "    activities:\n"
            "      ratio-tables:\n"
            "        name: Ratio Tables\n"
        )

        curriculum = load_curriculum(overlay)

        assert curriculum.next_chapter("number-sense").id == "ratios"
        assert curriculum.get("ratios").activities[0].difficulty == DifficultyTier.MEDIUM

    def test_overlay_removes_activity(self, tmp_path: Path) -> None:
        overlay = tmp_path / "curriculum.yaml"
        overlay.write_text(
            "chapters:\n"
            "  fractions:\n"
            "    activities:\n"
            "      word-problems: null\n"
        )

        curriculum = load_curriculum(overlay)

        assert not curriculum.has_activity("fractions", "word-problems")
        assert len(curriculum.get("fractions").activities) == 4

    def test_overlay_cannot_lower_passing_score(self, tmp_path: Path) -> None:
        overlay = tmp_path / "curriculum.yaml"
        overlay.write_text("chapters:\n  fractions:\n    passing_score: 50\n")

        with pytest.raises(CurriculumError, match="fractions"):
            load_curriculum(overlay)

    def test_missing_overlay(self, tmp_path: Path) -> None:
        with pytest.raises(CurriculumError, match="does not exist"):
            load_curriculum(tmp_path / "missing.yaml")
