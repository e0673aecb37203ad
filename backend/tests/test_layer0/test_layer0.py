"""Tests for Layer 0 — subjectivity extraction, seeds and the noise field."""

import numpy as np
import pytest

from isoflow.engine.context import EngineContext
from isoflow.engine.core.glyph import glyph_seed
from isoflow.engine.core.subjectivity import (
    DEFAULT_PROFILE,
    SubjectivityExtractor,
    analyze_complexity,
    analyze_emotional_expression,
    count_phrases,
    emotion_vector_from_scores,
)
from isoflow.engine.pipeline import Pipeline
from isoflow.engine.registry import Layer, register_all_transforms
from isoflow.utils.math_helpers import mean_abs
from isoflow.utils.noise import NoiseField, build_noise_table, get_noise_field
from tests.conftest import CASUAL_TEXT, INTENSE_TEXT, REFLECTIVE_TEXT, make_subject

register_all_transforms()


@pytest.fixture
def extractor() -> SubjectivityExtractor:
    return SubjectivityExtractor()


class TestFallbacks:
    def test_empty_input_is_default_profile(self, extractor):
        profile = extractor.extract("", [], {})
        assert profile == DEFAULT_PROFILE
        assert profile.narrative_style.type == "conversational"
        assert profile.narrative_style.score == 0.5

    def test_default_profile_values(self):
        p = DEFAULT_PROFILE
        assert p.emotional_expression.level == "moderate"
        assert p.emotional_expression.intensity == 0.5
        assert p.temporal_orientation.orientation == "mixed"
        assert p.temporal_orientation.score == 0.33
        assert p.self_reference.level == "medium"
        assert p.complexity.level == "moderate"
        assert p.authenticity.style == "casual"
        assert p.rhythm == 0.5
        assert p.reflection_depth == 0.5
        assert p.expression_mode.mode == "direct"
        assert p.uniqueness == pytest.approx(0.35)

    def test_missing_inputs_never_raise(self, extractor):
        assert extractor.extract(None) == DEFAULT_PROFILE
        assert extractor.extract("   \n ") == DEFAULT_PROFILE

    def test_text_without_indicators_keeps_fallbacks(self, extractor):
        profile = extractor.extract("Blue sky.")
        assert profile.narrative_style.type == "conversational"
        assert profile.authenticity.style == "casual"
        assert profile.expression_mode.mode == "direct"


class TestLexicalAnalysis:
    def test_reflective_scenario(self, extractor):
        profile = extractor.extract(REFLECTIVE_TEXT, [], [])
        assert profile.narrative_style.type == "reflective"
        assert profile.narrative_style.score == 1.0
        assert profile.reflection_depth > 0
        assert profile.reflection_depth == 1.0

    def test_reflective_scenario_secondary_fields(self, extractor):
        profile = extractor.extract(REFLECTIVE_TEXT)
        assert profile.temporal_orientation.orientation == "present_focused"
        assert profile.authenticity.style == "intimate"
        assert profile.expression_mode.mode == "direct"
        assert profile.emotional_expression.level == "reserved"
        assert profile.emotional_expression.intensity == pytest.approx(0.25)

    def test_word_boundaries(self):
        # "likely" and "unlike" do not contain the word "like"
        assert count_phrases("likely unlike", ("like",)) == 0
        assert count_phrases("i like it like that", ("like",)) == 2

    def test_distribution_sums_to_one(self, extractor):
        profile = extractor.extract(CASUAL_TEXT)
        assert sum(profile.narrative_style.distribution.values()) == pytest.approx(1.0)
        assert sum(profile.temporal_orientation.distribution.values()) == pytest.approx(1.0)

    def test_casual_text(self, extractor):
        profile = extractor.extract(CASUAL_TEXT)
        assert profile.authenticity.style == "casual"
        assert profile.temporal_orientation.orientation == "past_focused"

    def test_intense_emotion(self, extractor):
        profile = extractor.extract(INTENSE_TEXT, emotion_vector=[0.1, 0.0, 0.9, 0.0, 0.0, 0.0, 0.0])
        assert profile.emotional_expression.level == "intense"
        assert profile.emotional_expression.intensity == 1.0

    def test_emotion_vector_raises_intensity(self):
        low = analyze_emotional_expression("plain words", [0.1] * 7)
        high = analyze_emotional_expression("plain words", [0.9] + [0.0] * 6)
        assert high.intensity > low.intensity

    def test_scores_within_unit_interval(self, extractor):
        for text in (REFLECTIVE_TEXT, CASUAL_TEXT, INTENSE_TEXT):
            p = extractor.extract(text, [0.2, -0.4, 0.9], [0.5, 0.1, 0.1, 0.1, 0.1, 0.05, 0.05])
            for value in (
                p.narrative_style.score,
                p.emotional_expression.intensity,
                p.self_reference.score,
                p.authenticity.score,
                p.rhythm,
                p.reflection_depth,
                p.expression_mode.score,
                p.uniqueness,
            ):
                assert 0.0 <= value <= 1.0

    def test_semantic_term_divides_by_twenty(self):
        assert mean_abs([0.5] * 5, 20) == pytest.approx(0.125)
        assert mean_abs([-1.0] * 30, 20) == pytest.approx(1.0)
        assert mean_abs([], 20) == 0.5

    def test_short_embedding_lowers_complexity(self):
        short = analyze_complexity(CASUAL_TEXT, [0.8] * 5)
        full = analyze_complexity(CASUAL_TEXT, [0.8] * 20)
        assert full.score - short.score == pytest.approx(0.2 * (0.8 - 0.2))


class TestEmotionVector:
    def test_named_scores_in_order(self):
        vec = emotion_vector_from_scores({"fear": 0.4, "joy": 0.6})
        assert vec == [0.6, 0.0, 0.0, 0.4, 0.0, 0.0, 0.0]

    def test_neutral_only_spreads(self):
        vec = emotion_vector_from_scores({"neutral": 1.0})
        assert vec == pytest.approx([0.1, 0.2, 0.1, 0.1, 0.1, 0.1, 0.3])

    def test_empty_scores(self):
        assert emotion_vector_from_scores({}) == []
        assert emotion_vector_from_scores(None) == []

    def test_mapping_and_sequence_inputs_agree(self, extractor):
        scores = {"joy": 0.8, "sadness": 0.2}
        a = extractor.extract(INTENSE_TEXT, emotion_vector=scores)
        b = extractor.extract(INTENSE_TEXT, emotion_vector=emotion_vector_from_scores(scores))
        assert a == b


class TestSeed:
    def test_seed_uses_id_digits(self):
        s = make_subject("Participant 12", text="one two")
        # 12 × 10000 + len("one two") + 2 words
        assert glyph_seed(s) == 120009

    def test_seed_is_deterministic(self):
        s = make_subject("P7", semantic=(0.125, -0.25, 0.5), emotion=(0.5, 0.25, 0, 0, 0, 0, 0.25), text="hello")
        assert glyph_seed(s) == glyph_seed(s)
        assert glyph_seed(s) == 70000 + 875 + 500 + 5 + 1


class TestNoiseField:
    def test_table_is_read_only(self):
        table = build_noise_table(64)
        with pytest.raises(ValueError):
            table[0] = 1.0

    def test_table_is_smooth(self):
        table = NoiseField().table
        assert len(table) == 512
        assert float(np.max(np.abs(np.diff(table)))) < 0.4

    def test_sample_is_deterministic_and_bounded(self):
        field = NoiseField()
        values = [field.sample(x * 0.37, -x * 0.11, seed=42) for x in range(200)]
        again = [NoiseField().sample(x * 0.37, -x * 0.11, seed=42) for x in range(200)]
        assert values == again
        assert all(-1.0 <= v <= 1.0 for v in values)

    def test_zero_octaves(self):
        assert NoiseField().sample(1.0, 2.0, seed=3, octaves=0) == 0.0

    def test_shared_field(self):
        assert get_noise_field(512) is get_noise_field(512)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            NoiseField(0)


def test_layer0_transforms_populate_glyph_data():
    subjects = [make_subject("P1", text=REFLECTIVE_TEXT), make_subject("P2")]
    ctx = EngineContext(subjects=subjects)
    Pipeline().run_layer(ctx, Layer.EXTRACTION)

    assert ctx.glyphs["P1"].profile.narrative_style.type == "reflective"
    assert ctx.glyphs["P1"].features["narrative_style"] == "reflective"
    assert ctx.glyphs["P2"].profile == DEFAULT_PROFILE
    assert ctx.glyphs["P1"].seed == glyph_seed(subjects[0])
