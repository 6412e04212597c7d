"""Tests for bzr_portal.content_generator"""

import json
from types import SimpleNamespace

import pytest
from bzr_portal import content_generator
from bzr_portal.content_generator import _safe_json_extract, generate_content


class FakeOpenAI:
    reply = ""

    def __init__(self, api_key):
        self.api_key = api_key
        self.responses = SimpleNamespace(create=self._create)

    def _create(self, model, instructions, input):
        return SimpleNamespace(output_text=self.reply)


@pytest.fixture
def fake_openai(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(content_generator, "OpenAI", FakeOpenAI)
    return FakeOpenAI


class TestJsonExtract:
    def test_plain(self):
        assert _safe_json_extract(' {"a": 1} ') == {"a": 1}

    def test_wrapped_in_prose(self):
        assert _safe_json_extract('Evo:\n```json\n{"a": 1}\n```') == {"a": 1}

    def test_no_json(self):
        with pytest.raises(ValueError):
            _safe_json_extract("nema json-a")


class TestGenerateContent:
    def test_template_without_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        result = generate_content("Obuka zaposlenih", "Obuka")
        assert "Obuka zaposlenih" in result.content
        assert result.excerpt
        assert result.tags == ["bzr", "obuka"]

    def test_model_reply(self, fake_openai):
        fake_openai.reply = json.dumps({
            "content": "## Naslov\nTekst",
            "excerpt": "Kratko",
            "tags": ["bzr", " rizik ", ""],
        })
        result = generate_content("Procena rizika")
        assert result.content == "## Naslov\nTekst"
        assert result.excerpt == "Kratko"
        assert result.tags == ["bzr", "rizik"]

    def test_blank_fields_fall_back_to_template(self, fake_openai):
        fake_openai.reply = '{"content": "", "excerpt": "' + "x" * 300 + '", "tags": "bzr"}'
        result = generate_content("Procena rizika")
        assert "Procena rizika" in result.content
        assert len(result.excerpt) == 200
        assert result.tags == ["bzr"]

    def test_unusable_reply(self, fake_openai):
        fake_openai.reply = "Izvinite, ne mogu."
        with pytest.raises(ValueError):
            generate_content("Procena rizika")
