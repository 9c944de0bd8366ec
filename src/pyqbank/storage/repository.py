"""Repository primitives for question, option and tag persistence."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import sqlite3
import uuid

from pyqbank.extraction.models import Difficulty, ExtractedOption, ExtractedQuestion
from pyqbank.storage.schema import apply_runtime_pragmas, ensure_schema


class StorageError(Exception):
    """Raised when a question cannot be written to the store."""


@dataclass(slots=True)
class StoredQuestion:
    id: str
    stem: str
    explanation: str | None
    difficulty: Difficulty
    year_appeared: int | None
    is_previous_year: bool
    subject_id: str | None
    stem_fingerprint: str
    options: list[ExtractedOption]
    tag_names: list[str]


class QuestionRepository:
    """Thin transactional layer over the SQLite question bank schema."""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._connection = sqlite3.connect(str(self._db_path))
        self._connection.row_factory = sqlite3.Row
        apply_runtime_pragmas(self._connection)
        ensure_schema(self._connection)

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "QuestionRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def add_subject(self, name: str) -> str:
        """Insert a subject by name if missing and return its id."""

        clean_name = name.strip()
        if not clean_name:
            raise ValueError("Subject name cannot be empty")

        with self._connection:
            self._connection.execute(
                "INSERT INTO subjects (id, name) VALUES (?, ?) ON CONFLICT(name) DO NOTHING",
                (uuid.uuid4().hex, clean_name),
            )
        row = self._connection.execute("SELECT id FROM subjects WHERE name = ?", (clean_name,)).fetchone()
        return str(row["id"])

    def find_subject_id(self, name: str | None) -> str | None:
        """Case-insensitive "name contains" lookup; first match by name wins."""

        if not name:
            return None
        row = self._connection.execute(
            """
            SELECT id FROM subjects
            WHERE instr(lower(name), lower(?)) > 0
            ORDER BY name ASC
            LIMIT 1
            """,
            (name,),
        ).fetchone()
        return str(row["id"]) if row is not None else None

    def has_stem_fingerprint(self, fingerprint: str) -> bool:
        row = self._connection.execute(
            "SELECT 1 FROM questions WHERE stem_fingerprint = ? LIMIT 1",
            (fingerprint,),
        ).fetchone()
        return row is not None

    def create_question(self, question: ExtractedQuestion, *, stem_fingerprint: str) -> str:
        """Write a question, its options and tag links in one transaction."""

        question_id = uuid.uuid4().hex
        try:
            with self._connection:
                self._connection.execute(
                    """
                    INSERT INTO questions (
                        id, stem, explanation, difficulty, year_appeared,
                        is_previous_year, subject_id, stem_fingerprint
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        question_id,
                        question.stem,
                        question.explanation,
                        question.difficulty.value,
                        question.year_appeared,
                        int(question.is_previous_year),
                        question.subject_id,
                        stem_fingerprint,
                    ),
                )
                self._connection.executemany(
                    """
                    INSERT INTO question_options (question_id, text, is_correct, option_order)
                    VALUES (?, ?, ?, ?)
                    """,
                    [(question_id, option.text, int(option.is_correct), option.order) for option in question.options],
                )
                for tag_name in question.tag_names:
                    tag_id = self._upsert_tag(tag_name)
                    self._connection.execute(
                        "INSERT OR IGNORE INTO question_tags (question_id, tag_id) VALUES (?, ?)",
                        (question_id, tag_id),
                    )
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to store question: {exc}") from exc
        return question_id

    def _upsert_tag(self, name: str) -> int:
        self._connection.execute("INSERT INTO tags (name) VALUES (?) ON CONFLICT(name) DO NOTHING", (name,))
        row = self._connection.execute("SELECT id FROM tags WHERE name = ?", (name,)).fetchone()
        return int(row["id"])

    def get_question(self, question_id: str) -> StoredQuestion | None:
        row = self._connection.execute("SELECT * FROM questions WHERE id = ?", (question_id,)).fetchone()
        if row is None:
            return None

        option_rows = self._connection.execute(
            """
            SELECT text, is_correct, option_order FROM question_options
            WHERE question_id = ?
            ORDER BY option_order ASC
            """,
            (question_id,),
        ).fetchall()
        tag_rows = self._connection.execute(
            """
            SELECT t.name FROM tags t
            JOIN question_tags qt ON qt.tag_id = t.id
            WHERE qt.question_id = ?
            ORDER BY t.id ASC
            """,
            (question_id,),
        ).fetchall()

        return StoredQuestion(
            id=str(row["id"]),
            stem=row["stem"],
            explanation=row["explanation"],
            difficulty=Difficulty(row["difficulty"]),
            year_appeared=row["year_appeared"],
            is_previous_year=bool(row["is_previous_year"]),
            subject_id=row["subject_id"],
            stem_fingerprint=row["stem_fingerprint"],
            options=[
                ExtractedOption(
                    text=option["text"],
                    is_correct=bool(option["is_correct"]),
                    order=int(option["option_order"]),
                )
                for option in option_rows
            ],
            tag_names=[tag["name"] for tag in tag_rows],
        )

    def count_questions(self) -> int:
        return int(self._connection.execute("SELECT COUNT(*) AS c FROM questions").fetchone()["c"])
