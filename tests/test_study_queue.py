"""Unit tests for queue building."""

import random
from collections import Counter

from flashvocab.core import DAY_MS
from flashvocab.study_queue import Scope, StudyMode, build_queue

from helpers import NOW, make_sentence, make_word


def _words():
    return [make_word(f"word{i}", next_review=NOW - i) for i in range(5)]


def _sentences():
    return [make_sentence(f"Sentence {i}.", next_review=NOW + DAY_MS * i) for i in range(3)]


class TestBuildQueue:
    def test_all_scope_all_mode_is_a_permutation(self, rng: random.Random) -> None:
        words, sentences = _words(), _sentences()
        queue = build_queue(Scope.ALL, StudyMode.ALL, words, sentences, NOW, rng=rng)

        assert len(queue) == 8
        expected = [i.identity for i in words] + [i.identity for i in sentences]
        assert Counter(item.identity for item in queue) == Counter(expected)

    def test_word_scope(self, rng: random.Random) -> None:
        queue = build_queue(Scope.WORD, StudyMode.ALL, _words(), _sentences(), NOW, rng=rng)
        assert {item.kind for item in queue} == {"word"}
        assert len(queue) == 5

    def test_sentence_scope(self, rng: random.Random) -> None:
        queue = build_queue("sentence", "all", _words(), _sentences(), NOW, rng=rng)
        assert {item.kind for item in queue} == {"sentence"}
        assert len(queue) == 3

    def test_due_mode_filters(self, rng: random.Random) -> None:
        queue = build_queue(Scope.ALL, StudyMode.DUE, _words(), _sentences(), NOW, rng=rng)
        # Every word is due; only "Sentence 0." (next_review == NOW) is.
        assert len(queue) == 6
        assert "Sentence 0." in {item.identity for item in queue}

    def test_due_mode_with_nothing_due_is_empty(self) -> None:
        later = [make_word("x", next_review=NOW + 1)]
        assert build_queue(Scope.ALL, StudyMode.DUE, later, [], NOW) == []

    def test_empty_collections(self) -> None:
        assert build_queue(Scope.ALL, StudyMode.ALL, [], [], NOW) == []

    def test_output_is_a_snapshot(self, rng: random.Random) -> None:
        words = _words()
        queue = build_queue(Scope.WORD, StudyMode.ALL, words, [], NOW, rng=rng)
        queue[0].srs_level = 4
        assert all(word.srs_level == 0 for word in words)
        assert all(item is not word for item in queue for word in words)

    def test_inputs_not_reordered(self, rng: random.Random) -> None:
        words = _words()
        before = [w.identity for w in words]
        build_queue(Scope.WORD, StudyMode.ALL, words, [], NOW, rng=rng)
        assert [w.identity for w in words] == before

    def test_seeded_rng_is_reproducible(self) -> None:
        first = build_queue(Scope.ALL, StudyMode.ALL, _words(), _sentences(), NOW, rng=random.Random(7))
        second = build_queue(Scope.ALL, StudyMode.ALL, _words(), _sentences(), NOW, rng=random.Random(7))
        assert [i.identity for i in first] == [i.identity for i in second]

    def test_every_position_is_reachable(self) -> None:
        rng = random.Random(42)
        words = [make_word(c) for c in "abc"]
        orders = {
            tuple(i.identity for i in build_queue(Scope.WORD, StudyMode.ALL, words, [], NOW, rng=rng))
            for _ in range(300)
        }
        assert len(orders) == 6
