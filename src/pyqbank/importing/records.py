"""Read question records from JSON files for direct import or validation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def read_question_records(path: Path) -> list[Any]:
    """Accept a bare array or an object carrying a ``questions`` array."""

    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("questions")
    if not isinstance(payload, list):
        raise ValueError("JSON file must contain an array of questions")
    return payload
