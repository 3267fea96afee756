"""Tests for the command-line interface."""

import argparse
from unittest.mock import MagicMock, patch

import pytest

from flashvocab import cli
from flashvocab.core import ItemKind, VocabularyItem
from flashvocab.database import ItemStore
from flashvocab.errors import PersistenceError

from helpers import NOW, make_sentence, make_word


def _scripted(*answers: str):
    replies = iter(answers)
    return lambda prompt: next(replies)


class TestAddCommands:
    def test_add_word_manually(self, store: ItemStore, capsys) -> None:
        args = argparse.Namespace(word=" ubiquitous ", meaning="phổ biến", ipa="", example="")
        cli.add_word(store, args)

        item = store.get_item(ItemKind.WORD, "ubiquitous")
        assert item.meaning_vi == "phổ biến"
        assert item.srs_level == 0
        assert "Saved word: ubiquitous" in capsys.readouterr().out

    def test_add_word_twice(self, store: ItemStore, capsys) -> None:
        args = argparse.Namespace(word="echo", meaning="", ipa="", example="")
        cli.add_word(store, args)
        cli.add_word(store, args)
        assert "Already saved: echo" in capsys.readouterr().out

    def test_add_sentence_with_lookup(self, store: ItemStore) -> None:
        lookup = MagicMock()
        looked_up = make_sentence("Take it easy.", level=3, next_review=0)
        lookup.lookup_sentence.return_value = looked_up
        args = argparse.Namespace(sentence="take it easy", meaning="")

        cli.add_sentence(store, args, lookup)

        saved = store.get_item(ItemKind.SENTENCE, "Take it easy.")
        assert saved.srs_level == 0
        assert saved.next_review > 0


class TestStudy:
    def test_nothing_to_study(self, store: ItemStore, capsys) -> None:
        cli.study(store, cli.Scope.ALL, cli.StudyMode.DUE, input_fn=_scripted())
        assert "No items to review!" in capsys.readouterr().out

    def test_grades_every_item(self, store: ItemStore, capsys) -> None:
        store.save(ItemKind.WORD, [make_word("one"), make_word("two")])
        cli.study(store, cli.Scope.WORD, cli.StudyMode.ALL, input_fn=_scripted("", "y", "", "n"))

        levels = sorted(w.srs_level for w in store.load(ItemKind.WORD))
        assert levels == [0, 1]
        assert "Session complete! 2 item(s) reviewed." in capsys.readouterr().out

    def test_quit_keeps_graded_items(self, store: ItemStore, capsys) -> None:
        store.save(ItemKind.WORD, [make_word("one"), make_word("two")])
        cli.study(store, cli.Scope.WORD, cli.StudyMode.ALL, input_fn=_scripted("", "maybe", "y", "q"))

        levels = sorted(w.srs_level for w in store.load(ItemKind.WORD))
        assert levels == [0, 1]
        out = capsys.readouterr().out
        assert "Please answer y, n or q" in out
        assert "Stopped. 1 graded, 1 left for later." in out


class TestReporting:
    def test_stats(self, store: ItemStore, capsys) -> None:
        store.save(ItemKind.WORD, [make_word("a", level=4, next_review=NOW * 2), make_word("b")])
        store.save(ItemKind.SENTENCE, [make_sentence("C.", level=2)])
        cli.show_stats(store)

        out = capsys.readouterr().out
        assert "Words: 2 (1 due)" in out
        assert "Sentences: 1 (1 due)" in out
        assert "Level 4 (30 days): 1" in out

    def test_list_and_remove(self, store: ItemStore, capsys) -> None:
        store.add_item(VocabularyItem.new("keep", meaning_vi="giữ"))
        cli.list_items(store, ItemKind.WORD)
        assert "keep: giữ [due]" in capsys.readouterr().out

        cli.remove_item(store, ItemKind.WORD, "keep")
        cli.remove_item(store, ItemKind.WORD, "keep")
        out = capsys.readouterr().out
        assert "Removed word: keep" in out
        assert "Not found: keep" in out

    def test_export_to_file(self, store: ItemStore, tmp_path) -> None:
        store.add_item(make_word("file"))
        target = tmp_path / "out.csv"
        cli.export_items(store, str(target))
        assert "Word,file" in target.read_text(encoding="utf-8")


class TestMain:
    def test_no_command_exits(self) -> None:
        with pytest.raises(SystemExit):
            cli.main([])

    def test_lookup_without_api_key_exits(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("FLASHVOCAB_DB_PATH", str(tmp_path / "db.duckdb"))
        monkeypatch.setenv("GEMINI_API_KEY", "")
        with patch("flashvocab.config.load_dotenv"):
            with pytest.raises(SystemExit):
                cli.main(["add-word", "cat", "--lookup"])

    def test_store_error_is_reported_without_traceback(self, monkeypatch, tmp_path, capsys) -> None:
        monkeypatch.setenv("FLASHVOCAB_DB_PATH", str(tmp_path / "db.duckdb"))
        with patch("flashvocab.config.load_dotenv"), patch(
            "flashvocab.cli.study", side_effect=PersistenceError("disk full")
        ):
            with pytest.raises(SystemExit) as exc:
                cli.main(["study"])
        assert exc.value.code == 1
        assert "Error: disk full" in capsys.readouterr().out

    def test_add_then_list_through_main(self, monkeypatch, tmp_path, capsys) -> None:
        monkeypatch.setenv("FLASHVOCAB_DB_PATH", str(tmp_path / "db.duckdb"))
        with patch("flashvocab.config.load_dotenv"):
            cli.main(["add-sentence", "Long time no see.", "--meaning", "Lâu rồi không gặp."])
            cli.main(["list", "--kind", "sentence"])
        assert "Long time no see.: Lâu rồi không gặp. [due]" in capsys.readouterr().out
