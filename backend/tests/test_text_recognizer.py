"""
Tests for OCR text recognizers.
"""

import json
from types import SimpleNamespace

from menu_scanner.services.text_recognizer import (
    MockTextRecognizer,
    ReplayTextRecognizer,
    VisionTextRecognizer,
    split_lines,
)


class FakeVisionClient:

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = 0

    def document_text_detection(self, image):
        self.calls += 1
        if self.exc:
            raise self.exc
        return self.response


def vision_response(text="", error_message="", text_annotations=()):
    return SimpleNamespace(
        error=SimpleNamespace(message=error_message),
        full_text_annotation=SimpleNamespace(text=text),
        text_annotations=list(text_annotations),
    )


def test_split_lines():
    assert split_lines("Opus One 2018\n  $320 \n\n\nMeiomi, Coastal\n") == ["Opus One 2018", "$320", "Meiomi, Coastal"]


def test_mock_scenarios():
    assert MockTextRecognizer().recognize(b"") == MockTextRecognizer.MENU_LINES
    assert MockTextRecognizer("blank").recognize(b"") == []


def test_mock_returns_copy():
    lines = MockTextRecognizer().recognize(b"")
    lines.append("extra")
    assert "extra" not in MockTextRecognizer.MENU_LINES


class TestReplay:

    def test_lines_fixture(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text(json.dumps({"lines": ["Opus One 2018", "$320"]}))
        assert ReplayTextRecognizer(path).recognize(b"") == ["Opus One 2018", "$320"]

    def test_raw_text_fixture(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text(json.dumps({"raw_text": "Malbec\nCatena Zapata 2019\n"}))
        assert ReplayTextRecognizer(str(path)).recognize(b"") == ["Malbec", "Catena Zapata 2019"]


class TestVision:

    def test_full_text_annotation(self):
        recognizer = VisionTextRecognizer()
        recognizer._client = FakeVisionClient(vision_response("Pinot Noir\n Domaine Drouhin 2019 \n"))
        assert recognizer.recognize(b"image") == ["Pinot Noir", "Domaine Drouhin 2019"]

    def test_falls_back_to_text_annotations(self):
        recognizer = VisionTextRecognizer()
        annotation = SimpleNamespace(description="Opus One 2018\n$320")
        recognizer._client = FakeVisionClient(vision_response(text_annotations=[annotation]))
        assert recognizer.recognize(b"image") == ["Opus One 2018", "$320"]

    def test_api_error_yields_no_lines(self):
        recognizer = VisionTextRecognizer()
        recognizer._client = FakeVisionClient(vision_response("ignored", error_message="quota exceeded"))
        assert recognizer.recognize(b"image") == []

    def test_exception_yields_no_lines(self):
        recognizer = VisionTextRecognizer()
        client = FakeVisionClient(exc=RuntimeError("network down"))
        recognizer._client = client
        assert recognizer.recognize(b"image") == []
        assert client.calls == 1
