"""Tests for best-effort user memory."""
import json

import pytest

from moodmate.core.memory import UserMemory, extract_name


class TestExtractName:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Hi, my name is Candace", "Candace"),
            ("MY NAME IS  Jean-Luc!", "Jean-Luc"),
            ("I don't want to say my name", None),
            ("", None),
        ],
    )
    def test_extract(self, text, expected):
        assert extract_name(text) == expected


class TestUserMemory:
    def test_missing_file_is_empty(self, tmp_path):
        memory = UserMemory(tmp_path / "memory.json")

        assert memory.load("u1") == {}

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "memory.json"
        memory = UserMemory(path)
        memory.save("u1", {"name": "Candace"})

        assert memory.load("u1") == {"name": "Candace"}
        assert json.loads(path.read_text())["u1"]["name"] == "Candace"

    def test_save_merges(self, tmp_path):
        memory = UserMemory(tmp_path / "memory.json")
        memory.save("u1", {"name": "Candace"})
        memory.save("u1", {"likes": "cookies"})
        memory.save("u2", {"name": "Phineas"})

        assert memory.load("u1") == {"name": "Candace", "likes": "cookies"}
        assert memory.load("u2") == {"name": "Phineas"}

    def test_corrupt_file_degrades(self, tmp_path):
        path = tmp_path / "memory.json"
        path.write_text("{not json")
        memory = UserMemory(path)

        assert memory.load("u1") == {}
        memory.save("u1", {"name": "Candace"})
        assert memory.load("u1") == {"name": "Candace"}

    def test_disabled_memory(self):
        memory = UserMemory(None)
        memory.save("u1", {"name": "Candace"})

        assert memory.load("u1") == {}
