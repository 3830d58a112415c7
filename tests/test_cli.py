from __future__ import annotations

import importlib
import json
from pathlib import Path

import pytest

from quizcache.cli.main import format_question, main, resolve_choice
from quizcache.errors import GenerationFailure

from conftest import ScriptedGenerator, fenced, make_payload

cli_module = importlib.import_module("quizcache.cli.main")


class FakeChatGenerator(ScriptedGenerator):
    """Stands in for ChatCompletionGenerator inside the CLI."""

    queued: list = []

    def __init__(self, config, client=None):
        super().__init__(list(FakeChatGenerator.queued))
        self.config = config

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


@pytest.fixture
def fake_generator(monkeypatch):
    monkeypatch.setattr(cli_module, "ChatCompletionGenerator", FakeChatGenerator)
    FakeChatGenerator.queued = []
    return FakeChatGenerator


@pytest.fixture
def config_path(tmp_path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"logging": {"log_dir": str(tmp_path / "logs")}}))
    return path


class TestHelpers:
    def test_resolve_letter(self):
        opts = ("Stack", "Queue", "Heap", "Trie")
        assert resolve_choice("b", opts) == "Queue"
        assert resolve_choice(" D ", opts) == "Trie"

    def test_resolve_text(self):
        opts = ("Stack", "Queue", "Heap", "Trie")
        assert resolve_choice("Heap", opts) == "Heap"
        assert resolve_choice("E", opts) == "E"

    def test_format_question(self):
        text = format_question(0, "Which is FIFO?", ["Stack", "Queue", "Heap", "Trie"])
        assert text.splitlines()[0] == "Question 1:"
        assert "  B) Queue" in text


class TestFetchCommand:
    def test_fetch_writes_records(self, fake_generator, config_path, tmp_path, capsys):
        fake_generator.queued = [fenced(make_payload(question="Q0")), fenced(make_payload(question="Q1"))]
        out = tmp_path / "out" / "questions.json"

        code = main(["--config", str(config_path), "fetch", "0", "1", "0", "--output", str(out)])

        assert code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert sorted(data) == ["0", "1"]
        assert data["0"]["question"] == "Q0"
        assert data["1"]["correctAnswer"] == "Hash table"
        assert "Wrote 2 questions" in capsys.readouterr().out

    def test_fetch_reports_failure(self, fake_generator, config_path, capsys):
        fake_generator.queued = [GenerationFailure("Failed to fetch question", status_code=500, body="boom")]
        code = main(["--config", str(config_path), "fetch", "0"])
        assert code == 1
        assert "HTTP 500" in capsys.readouterr().out

    def test_fetch_reports_validation_details(self, fake_generator, config_path, capsys):
        fake_generator.queued = ['{"question":"Q","options":["A","B"],"correctAnswer":"C","explanation":"E"}']
        code = main(["--config", str(config_path), "fetch", "0"])
        assert code == 1
        assert "too few items" in capsys.readouterr().out

    def test_negative_index(self, fake_generator, config_path):
        assert main(["--config", str(config_path), "fetch", "-1"]) == 1


class TestPlayCommand:
    @pytest.mark.asyncio
    async def test_play_scores_answers(self, fake_generator, config_path, capsys):
        from quizcache.config import AppConfig

        fake_generator.queued = [fenced(make_payload()), fenced(make_payload())]
        replies = iter(["B", "Stack"])
        cfg = AppConfig.from_file(config_path)

        code = await cli_module.run_play(cfg, 0, 2, input_fn=lambda prompt: next(replies))

        out = capsys.readouterr().out
        assert code == 0
        assert "Correct!" in out
        assert "Incorrect." in out
        assert "Score: 1/2" in out

    @pytest.mark.asyncio
    async def test_play_counts_only_answered_questions(self, fake_generator, config_path, capsys):
        from quizcache.config import AppConfig

        fake_generator.queued = [fenced(make_payload()), fenced(make_payload())]
        replies = iter(["B"])

        def reply(prompt):
            try:
                return next(replies)
            except StopIteration:
                raise EOFError

        code = await cli_module.run_play(AppConfig.from_file(config_path), 0, 3, input_fn=reply)

        assert code == 0
        assert "Score: 1/1" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_play_stops_on_error(self, fake_generator, config_path, capsys):
        from quizcache.config import AppConfig

        fake_generator.queued = ["no json here"]
        code = await cli_module.run_play(AppConfig.from_file(config_path), 0, 1, input_fn=lambda p: "A")
        assert code == 1
        assert "Error:" in capsys.readouterr().out


class TestArgs:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_missing_config(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "missing.json"), "fetch", "0"]) == 1
        assert "not found" in capsys.readouterr().out

    def test_invalid_json_config(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert main(["--config", str(path), "fetch", "0"]) == 1
        assert "Invalid JSON" in capsys.readouterr().out

    def test_invalid_yaml_config(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("generator: [unclosed\n")
        assert main(["--config", str(path), "fetch", "0"]) == 1
        assert "Invalid YAML" in capsys.readouterr().out

    def test_keyboard_interrupt_exits_cleanly(self, monkeypatch, config_path, capsys):
        def interrupted(*args, **kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr(cli_module, "run_play", interrupted)
        assert main(["--config", str(config_path), "play", "--count", "1"]) == 1
        assert "Interrupted by user" in capsys.readouterr().out
