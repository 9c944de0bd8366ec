"""SQLite schema and pragmas for the question bank."""

from __future__ import annotations

import sqlite3


PRAGMA_BUSY_TIMEOUT_MS = 5000


def apply_runtime_pragmas(connection: sqlite3.Connection) -> None:
    """Apply runtime pragmas for concurrent readers and enforced foreign keys."""

    connection.execute("PRAGMA journal_mode=WAL;")
    connection.execute(f"PRAGMA busy_timeout={PRAGMA_BUSY_TIMEOUT_MS};")
    connection.execute("PRAGMA synchronous=NORMAL;")
    connection.execute("PRAGMA foreign_keys=ON;")


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create question, tag and job tables if missing."""

    connection.executescript(
        """
        CREATE TABLE IF NOT EXISTS subjects (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS questions (
            id TEXT PRIMARY KEY,
            stem TEXT NOT NULL,
            explanation TEXT,
            difficulty TEXT NOT NULL CHECK(difficulty IN ('EASY','MEDIUM','HARD')),
            year_appeared INTEGER,
            is_previous_year INTEGER NOT NULL DEFAULT 0 CHECK(is_previous_year IN (0,1)),
            subject_id TEXT REFERENCES subjects(id),
            topic_id TEXT,
            subtopic_id TEXT,
            stem_fingerprint TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS question_options (
            id INTEGER PRIMARY KEY,
            question_id TEXT NOT NULL REFERENCES questions(id) ON DELETE CASCADE,
            text TEXT NOT NULL,
            is_correct INTEGER NOT NULL CHECK(is_correct IN (0,1)),
            option_order INTEGER NOT NULL,
            UNIQUE(question_id, option_order)
        );

        CREATE TABLE IF NOT EXISTS tags (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS question_tags (
            question_id TEXT NOT NULL REFERENCES questions(id) ON DELETE CASCADE,
            tag_id INTEGER NOT NULL REFERENCES tags(id) ON DELETE CASCADE,
            PRIMARY KEY (question_id, tag_id)
        );

        CREATE TABLE IF NOT EXISTS processing_jobs (
            job_id TEXT PRIMARY KEY,
            status TEXT NOT NULL,
            progress REAL NOT NULL DEFAULT 0,
            total_questions INTEGER NOT NULL DEFAULT 0,
            processed_questions INTEGER NOT NULL DEFAULT 0,
            errors_json TEXT NOT NULL DEFAULT '[]',
            results_json TEXT,
            error TEXT,
            started_at TEXT NOT NULL,
            updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_questions_stem_fingerprint ON questions(stem_fingerprint);
        CREATE INDEX IF NOT EXISTS idx_questions_subject_id ON questions(subject_id);
        CREATE INDEX IF NOT EXISTS idx_question_options_question_id ON question_options(question_id);
        CREATE INDEX IF NOT EXISTS idx_question_tags_question_id ON question_tags(question_id);
        """
    )
