"""Participant data loading — raw JSON records → immutable Subjects."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import numpy as np
from pydantic import ValidationError

from isoflow.engine.core.subject import Subject
from isoflow.engine.core.subjectivity import emotion_vector_from_scores
from isoflow.models.requests import ParticipantRecord
from isoflow.utils.color import subject_color
from isoflow.utils.math_helpers import clamp

logger = logging.getLogger(__name__)

# std of the semantic embedding, offset then scaled into [0, 1]
_UNIQUENESS_OFFSET = 0.1
_UNIQUENESS_SCALE = 0.3


class DataLoadError(RuntimeError):
    """Participant data is missing or malformed."""


def uniqueness_score(semantic: Sequence[float]) -> float:
    if len(semantic) == 0:
        return 0.5
    std = float(np.std(np.asarray(semantic, dtype=np.float64)))
    return clamp((std + _UNIQUENESS_OFFSET) / _UNIQUENESS_SCALE)


def subject_from_record(record: ParticipantRecord) -> Subject:
    semantic = tuple(record.semantic_embedding)
    emotion = tuple(emotion_vector_from_scores(record.emotion_scores))
    return Subject(
        id=record.participant_id.replace(" ", "_"),
        original_id=record.participant_id,
        text=record.text_content,
        semantic=semantic,
        emotion=emotion,
        unified=tuple(record.unified_embedding),
        emotion_scores=dict(record.emotion_scores),
        metadata=dict(record.metadata),
        color=subject_color(emotion, semantic),
        uniqueness_score=uniqueness_score(semantic),
    )


def subjects_from_records(
    records: Iterable[ParticipantRecord | Mapping[str, Any]],
) -> list[Subject]:
    """Validate and convert raw records. Raises DataLoadError on the first bad one."""
    subjects: list[Subject] = []
    for i, raw in enumerate(records):
        if isinstance(raw, ParticipantRecord):
            record = raw
        else:
            try:
                record = ParticipantRecord.model_validate(raw)
            except ValidationError as e:
                raise DataLoadError(f"Invalid participant record at index {i}: {e}") from e
        subjects.append(subject_from_record(record))
    return subjects


def load_participants(path: str | Path) -> list[Subject]:
    """Read a JSON array of participant records from ``path``."""
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise DataLoadError(f"Participant data not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise DataLoadError(f"Could not read participant data from {path}: {e}") from e

    if not isinstance(payload, list):
        raise DataLoadError(f"Expected a JSON array of participants in {path}, got {type(payload).__name__}")

    subjects = subjects_from_records(payload)
    logger.info("Loaded %d participants from %s", len(subjects), path)
    return subjects
