from __future__ import annotations

from dataclasses import replace
from pathlib import Path
import sqlite3

import pytest

from pyqbank.extraction.models import Difficulty, ExtractedOption, ExtractedQuestion
from pyqbank.extraction.normalization import stem_fingerprint
from pyqbank.storage.repository import QuestionRepository, StorageError


def _question(stem: str, *, tags: tuple[str, ...] = ("Previous Year", "JEE 2024")) -> ExtractedQuestion:
    return ExtractedQuestion(
        stem=stem,
        options=(
            ExtractedOption(text="5", is_correct=False, order=0),
            ExtractedOption(text="4", is_correct=True, order=1),
        ),
        explanation="Subtract two.",
        difficulty=Difficulty.MEDIUM,
        year_appeared=2024,
        tag_names=tags,
    )


def test_create_and_read_back_question(tmp_path: Path) -> None:
    with QuestionRepository(tmp_path / "bank.db") as repository:
        subject_id = repository.add_subject("Mathematics")
        question = _question("If x + 2 = 6 then x is")
        question_id = repository.create_question(
            replace(question, subject_id=subject_id),
            stem_fingerprint=stem_fingerprint(question.stem),
        )

        stored = repository.get_question(question_id)

    assert stored is not None
    assert stored.stem == "If x + 2 = 6 then x is"
    assert stored.subject_id == subject_id
    assert stored.difficulty is Difficulty.MEDIUM
    assert stored.is_previous_year is True
    assert [(option.text, option.is_correct, option.order) for option in stored.options] == [
        ("5", False, 0),
        ("4", True, 1),
    ]
    assert stored.tag_names == ["Previous Year", "JEE 2024"]


def test_tags_are_upserted_by_name(tmp_path: Path) -> None:
    with QuestionRepository(tmp_path / "bank.db") as repository:
        repository.create_question(_question("First stem"), stem_fingerprint="a")
        repository.create_question(_question("Second stem", tags=("Previous Year", "Evening")), stem_fingerprint="b")

        tag_names = [row["name"] for row in repository.connection.execute("SELECT name FROM tags ORDER BY id")]

    assert tag_names == ["Previous Year", "JEE 2024", "Evening"]


def test_failed_option_insert_leaves_no_partial_question(tmp_path: Path) -> None:
    broken = ExtractedQuestion(
        stem="Duplicate option order",
        options=(
            ExtractedOption(text="1", is_correct=True, order=0),
            ExtractedOption(text="2", is_correct=False, order=0),
        ),
    )

    with QuestionRepository(tmp_path / "bank.db") as repository:
        with pytest.raises(StorageError, match="Failed to store question"):
            repository.create_question(broken, stem_fingerprint="x")

        assert repository.count_questions() == 0
        option_count = repository.connection.execute("SELECT COUNT(*) FROM question_options").fetchone()[0]
        assert option_count == 0


def test_subject_lookup_is_case_insensitive_contains(tmp_path: Path) -> None:
    with QuestionRepository(tmp_path / "bank.db") as repository:
        physics_id = repository.add_subject("JEE Physics")
        assert repository.add_subject("JEE Physics") == physics_id

        assert repository.find_subject_id("physics") == physics_id
        assert repository.find_subject_id("Chemistry") is None
        assert repository.find_subject_id(None) is None
        with pytest.raises(ValueError, match="Subject name cannot be empty"):
            repository.add_subject("  ")


def test_stem_fingerprint_lookup(tmp_path: Path) -> None:
    with QuestionRepository(tmp_path / "bank.db") as repository:
        fingerprint = stem_fingerprint("Some stem")
        assert repository.has_stem_fingerprint(fingerprint) is False

        repository.create_question(_question("Some stem"), stem_fingerprint=fingerprint)

        assert repository.has_stem_fingerprint(fingerprint) is True


def test_schema_enforces_foreign_keys(tmp_path: Path) -> None:
    with QuestionRepository(tmp_path / "bank.db") as repository:
        with pytest.raises(sqlite3.IntegrityError):
            with repository.connection:
                repository.connection.execute(
                    "INSERT INTO question_tags (question_id, tag_id) VALUES ('missing', 1)"
                )
