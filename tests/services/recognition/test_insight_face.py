"""Tests for the InsightFace embedding adapter."""
from types import SimpleNamespace

import numpy as np
import pytest

from visionassist.core.exceptions import ModelInferenceError
from visionassist.services.recognition import insight_face
from visionassist.services.recognition.insight_face import InsightFaceEmbedder


def _insight_face(bbox, score, embedding):
    return SimpleNamespace(
        bbox=np.array(bbox, dtype=np.float32),
        det_score=score,
        embedding=None if embedding is None else np.array(embedding, dtype=np.float32),
    )


class FakeFaceAnalysis:
    """Stands in for insightface.app.FaceAnalysis."""

    faces = []
    error = None

    def __init__(self, name, root, providers):
        self.name = name
        self.providers = providers
        self.max_nums = []

    def prepare(self, ctx_id, det_size):
        self.det_size = det_size

    def get(self, image, max_num=0):
        self.max_nums.append(max_num)
        if FakeFaceAnalysis.error is not None:
            raise FakeFaceAnalysis.error
        return list(FakeFaceAnalysis.faces)


@pytest.fixture
def embedder(monkeypatch):
    FakeFaceAnalysis.faces = []
    FakeFaceAnalysis.error = None
    monkeypatch.setattr(insight_face, "FaceAnalysis", FakeFaceAnalysis)
    return InsightFaceEmbedder(model_name="buffalo_s")


@pytest.fixture
def frame():
    return np.zeros((100, 200, 3), dtype=np.uint8)


class TestInsightFaceEmbedder:
    """Test suite for InsightFaceEmbedder."""

    async def test_detect_all_normalizes_boxes(self, embedder, frame):
        """Should report boxes relative to the frame size."""
        FakeFaceAnalysis.faces = [_insight_face([20, 10, 60, 50], 0.9, [0.1, 0.2])]

        faces = await embedder.detect_all(frame)

        assert len(faces) == 1
        box = faces[0].bounding_box
        assert box.left == pytest.approx(0.1)
        assert box.top == pytest.approx(0.1)
        assert box.width == pytest.approx(0.2)
        assert box.height == pytest.approx(0.4)
        assert faces[0].descriptor.tolist() == pytest.approx([0.1, 0.2])

    async def test_skips_faces_without_embedding(self, embedder, frame):
        FakeFaceAnalysis.faces = [
            _insight_face([0, 0, 10, 10], 0.8, None),
            _insight_face([0, 0, 20, 20], 0.7, [1.0, 0.0]),
        ]

        faces = await embedder.detect_all(frame)

        assert [f.confidence for f in faces] == [pytest.approx(0.7)]

    async def test_detect_single(self, embedder, frame):
        """Should ask the model for one face and return the most confident one."""
        FakeFaceAnalysis.faces = [
            _insight_face([0, 0, 10, 10], 0.6, [0.0, 1.0]),
            _insight_face([0, 0, 20, 20], 0.95, [1.0, 0.0]),
        ]

        face = await embedder.detect_single(frame)

        assert face.confidence == pytest.approx(0.95)
        assert embedder.model.max_nums == [1]

    async def test_detect_single_without_face(self, embedder, frame):
        assert await embedder.detect_single(frame) is None

    async def test_model_failure(self, embedder, frame):
        FakeFaceAnalysis.error = RuntimeError("onnx session failed")

        with pytest.raises(ModelInferenceError):
            await embedder.detect_all(frame)

    async def test_closed_model(self, embedder, frame):
        async with embedder:
            pass

        with pytest.raises(ModelInferenceError):
            await embedder.detect_all(frame)
