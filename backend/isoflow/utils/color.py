"""Color helpers — hex parsing, rgba strings, averaging. No engine imports."""

from __future__ import annotations

import math
from collections.abc import Sequence

DEFAULT_GLYPH_COLOR = "#8B7FA8"
DEFAULT_SUBJECT_COLOR = "#9C27B0"

# Order of the 7-dimensional emotion vector.
EMOTIONS = ("joy", "sadness", "anger", "fear", "surprise", "disgust", "neutral")

EMOTION_COLORS = {
    "joy": "#FFBE0B",
    "sadness": "#3A86FF",
    "anger": "#F44336",
    "fear": "#8338EC",
    "surprise": "#06FFA5",
    "disgust": "#FF6F00",
    "neutral": "#9C27B0",
}

# Picked from by semantic statistics when no emotion dominates.
SEMANTIC_PALETTE = (
    "#FF006E", "#FFBE0B", "#FB5607", "#8338EC", "#06FFA5",
    "#FF9F1C", "#C77DFF", "#FF1744", "#00E676", "#E91E63",
    "#4CAF50", "#F44336", "#FF4081", "#673AB7", "#009688",
    "#FF5722", "#FFC107", "#3A86FF", "#00F5FF", "#2196F3",
)

# Neutral above this share means the emotion signal is too flat to color by.
_NEUTRAL_DOMINANCE = 0.7
# Brightness range applied by emotion intensity: 0.9 - 1.1
_BRIGHTNESS_BASE = 0.9
_BRIGHTNESS_SPAN = 0.2

_NAMED_COLORS = {
    "black": "#000000", "white": "#ffffff", "red": "#ff0000",
    "green": "#008000", "blue": "#0000ff", "yellow": "#ffff00",
}


def parse_hex(color: str) -> tuple[int, int, int] | None:
    """Parse a hex color string to (r, g, b)."""
    if not color:
        return None
    color = color.strip().lower()
    color = _NAMED_COLORS.get(color, color)
    if not color.startswith("#"):
        return None
    color = color[1:]
    if len(color) == 3:
        color = color[0]*2 + color[1]*2 + color[2]*2
    if len(color) != 6:
        return None
    try:
        return (int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16))
    except ValueError:
        return None


def to_hex(rgb: Sequence[int]) -> str:
    return "#" + "".join(f"{max(0, min(255, int(c))):02x}" for c in rgb[:3])


def rgba(color: str, alpha: float) -> str:
    """CSS rgba() string; unparsable colors fall back to the default glyph color."""
    rgb = parse_hex(color) or parse_hex(DEFAULT_GLYPH_COLOR)
    r, g, b = rgb  # type: ignore[misc]
    return f"rgba({r}, {g}, {b}, {round(alpha, 4)})"


def adjust_brightness(color: str, factor: float) -> str:
    """Scale every channel by ``factor`` (floored, clamped). Hue is untouched."""
    rgb = parse_hex(color)
    if rgb is None:
        return color
    return to_hex([min(255, max(0, math.floor(c * factor))) for c in rgb])


def average_color(colors: Sequence[str], default: str = DEFAULT_GLYPH_COLOR) -> str:
    """Channel-wise floor mean of the parsable colors."""
    parsed = [rgb for rgb in (parse_hex(c) for c in colors) if rgb is not None]
    if not parsed:
        return default
    n = len(parsed)
    return to_hex([sum(rgb[i] for rgb in parsed) // n for i in range(3)])


def dominant_emotion(emotion: Sequence[float]) -> str:
    """First-max emotion name; ``neutral`` for an empty vector."""
    if len(emotion) == 0:
        return "neutral"
    best = 0
    for i in range(1, len(emotion)):
        if emotion[i] > emotion[best]:
            best = i
    return EMOTIONS[best] if best < len(EMOTIONS) else "neutral"


def emotion_color(emotion_name: str, emotion: Sequence[float]) -> str:
    base = EMOTION_COLORS.get(emotion_name, DEFAULT_SUBJECT_COLOR)
    idx = EMOTIONS.index(emotion_name) if emotion_name in EMOTIONS else -1
    intensity = emotion[idx] if 0 <= idx < len(emotion) else 0.0
    # A zero score reads as "unknown", so use the midpoint.
    intensity = intensity or 0.5
    return adjust_brightness(base, _BRIGHTNESS_BASE + intensity * _BRIGHTNESS_SPAN)


def semantic_color(semantic: Sequence[float]) -> str:
    if len(semantic) == 0:
        return DEFAULT_SUBJECT_COLOR
    features = [abs(v) for v in semantic[:10]]
    mean = sum(features) / len(features)
    variance = sum((v - mean) ** 2 for v in features) / len(features)
    n = len(SEMANTIC_PALETTE)
    i1 = math.floor(math.fmod(mean * 1000, n))
    i2 = math.floor(math.fmod(variance * 10000, n))
    return SEMANTIC_PALETTE[(i1 + i2) % n]


def subject_color(emotion: Sequence[float], semantic: Sequence[float]) -> str:
    """Base display color: emotion-driven, semantic-driven when emotion is flat."""
    name = dominant_emotion(emotion)
    neutral_idx = EMOTIONS.index("neutral")
    neutral_share = emotion[neutral_idx] if len(emotion) > neutral_idx else 0.0
    if name == "neutral" or neutral_share > _NEUTRAL_DOMINANCE:
        return semantic_color(semantic)
    return emotion_color(name, emotion)
