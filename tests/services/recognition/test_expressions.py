"""Tests for the DeepFace expression classifier."""
import numpy as np
import pytest

pytest.importorskip("deepface")

from faceapp.services.recognition import expressions as expressions_module  # noqa: E402
from faceapp.services.recognition.expressions import DeepFaceExpressionClassifier  # noqa: E402

EMOTION = {
    "angry": 1.0, "disgust": 0.0, "fear": 2.0, "happy": 85.0,
    "sad": 2.0, "surprise": 5.0, "neutral": 5.0,
}


@pytest.fixture
def analyze(monkeypatch):
    calls = []

    def install(result):
        def fake_analyze(**kwargs):
            calls.append(kwargs)
            return result
        monkeypatch.setattr(expressions_module.DeepFace, "analyze", fake_analyze)
        return calls

    return install


@pytest.fixture
def crop():
    return np.zeros((96, 80, 3), dtype=np.uint8)


def test_percentages_are_scaled_to_unit_range(analyze, crop):
    calls = analyze([{"emotion": EMOTION, "dominant_emotion": "happy"}])

    scores = DeepFaceExpressionClassifier().classify(crop)

    assert scores["happy"] == pytest.approx(0.85)
    assert scores["disgust"] == 0.0
    assert sum(scores.values()) == pytest.approx(1.0)
    # The crop is already a face, DeepFace must not look for one again
    assert calls[0]["detector_backend"] == "skip"
    assert calls[0]["enforce_detection"] is False
    assert calls[0]["actions"] == ("emotion",)
    assert calls[0]["img_path"] is crop


def test_single_dict_result_is_accepted(analyze, crop):
    analyze({"emotion": {"neutral": 100.0}})

    assert DeepFaceExpressionClassifier().classify(crop) == {"neutral": 1.0}


@pytest.mark.parametrize("result", [[], [{"dominant_emotion": "happy"}], [{"emotion": {}}]])
def test_missing_scores_give_none(analyze, crop, result):
    analyze(result)

    assert DeepFaceExpressionClassifier().classify(crop) is None
