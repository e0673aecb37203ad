"""Shared test fixtures."""

from __future__ import annotations

import pytest

from isoflow.engine.core.subject import Subject


# Interview transcripts

REFLECTIVE_TEXT = "A: I think I understand now. A: I realize this changed me."

INTERVIEW_TEXT = (
    "Q: Where did you grow up?\n"
    "A: I grew up by the sea. It was loud and bright.\n"
    "Q: What do you hope for?\n"
    "A: I hope to keep learning. Looking back, I realize I was always curious."
)

CASUAL_TEXT = (
    "Yeah I was gonna say, you know, it was fine. I mean I went there and I did the work. "
    "I said okay and that was that!"
)

INTENSE_TEXT = (
    "I love my family so much! It was amazing and wonderful. "
    "I hate how terrible that year was, it was horrible!!! Sooo devastated."
)


PARTICIPANT_RECORDS = [
    {
        "participant_id": "Participant 1",
        "text_content": INTERVIEW_TEXT,
        "semantic_embedding": [0.12, -0.4, 0.33, 0.05, -0.21, 0.48, 0.02, -0.07],
        "unified_embedding": [0.9, 0.1, 0.2, 0.05, 0.3, 0.1],
        "emotion_scores": {"joy": 0.7, "sadness": 0.1, "neutral": 0.2},
        "metadata": {"text_length": 2400},
    },
    {
        "participant_id": "Participant 2",
        "text_content": CASUAL_TEXT,
        "semantic_embedding": [0.1, -0.38, 0.3, 0.07, -0.2, 0.45, 0.01, -0.05],
        "unified_embedding": [0.88, 0.12, 0.21, 0.04, 0.31, 0.09],
        "emotion_scores": {"neutral": 0.9},
        "metadata": {"text_length": 800},
    },
    {
        "participant_id": "Participant 3",
        "text_content": INTENSE_TEXT,
        "semantic_embedding": [-0.5, 0.2, -0.1, 0.4, 0.3, -0.25, 0.15, 0.1],
        "unified_embedding": [0.05, 0.9, -0.3, 0.6, 0.0, -0.2],
        "emotion_scores": {"joy": 0.3, "anger": 0.6, "sadness": 0.1},
        "metadata": {},
    },
]

PARTICIPANT_POSITIONS = {
    "Participant_1": (100.0, 100.0),
    "Participant_2": (140.0, 110.0),
    "Participant_3": (400.0, 300.0),
}


def make_subject(
    subject_id: str,
    unified: tuple[float, ...] = (),
    text: str = "",
    semantic: tuple[float, ...] = (),
    emotion: tuple[float, ...] = (),
    color: str = "#3A86FF",
) -> Subject:
    return Subject(
        id=subject_id,
        original_id=subject_id,
        text=text,
        semantic=semantic,
        emotion=emotion,
        unified=unified,
        color=color,
    )


@pytest.fixture
def participant_records() -> list[dict]:
    return [dict(r) for r in PARTICIPANT_RECORDS]


@pytest.fixture
def identical_trio() -> list[Subject]:
    return [make_subject(f"s{i}", unified=(0.3, 0.5, 0.8)) for i in range(3)]


@pytest.fixture
def two_groups() -> tuple[list[Subject], dict[str, tuple[float, float]]]:
    """Two tight pairs with orthogonal vectors, far apart on the canvas."""
    subjects = [
        make_subject("a1", unified=(1.0, 0.0, 0.0), color="#FF0000"),
        make_subject("a2", unified=(1.0, 0.0, 0.0), color="#0000FF"),
        make_subject("b1", unified=(0.0, 1.0, 0.0), color="#00FF00"),
        make_subject("b2", unified=(0.0, 1.0, 0.0), color="#FFFFFF"),
    ]
    positions = {
        "a1": (-5.0, 0.0),
        "a2": (5.0, 0.0),
        "b1": (100.0, -20.0),
        "b2": (100.0, 20.0),
    }
    return subjects, positions
