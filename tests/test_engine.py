"""Tests for end-to-end move detection between two snapshots."""

import random

import pytest

from filemove.config import MoveDetectionConfig
from filemove.engine import MoveDetector, detect_moves, find_moves
from filemove.hashing import hash_text
from filemove.matcher import GreedyMatcher
from filemove.models import LineHashSequence, Match
from filemove.similarity import MAX_SCORE, score


def _file(key, *line_hashes):
    return LineHashSequence.of(key, line_hashes)


H1_5 = ("h1", "h2", "h3", "h4", "h5")


class TestScenarios:
    def test_a_unchanged_content_new_key(self):
        moves = find_moves([_file("old/A.txt", *H1_5)], [_file("new/A.txt", *H1_5)])
        assert moves == {"old/A.txt": "new/A.txt"}

    def test_b_one_line_changed(self):
        moves = find_moves(
            [_file("old/A.txt", *H1_5)],
            [_file("new/A.txt", "h1", "h2", "h3", "h4", "h9")],
        )
        assert moves == {"old/A.txt": "new/A.txt"}

    def test_c_zero_overlap(self):
        assert find_moves([_file("X", "h1", "h2")], [_file("Y", "h9", "h10")]) == {}

    def test_d_two_identical_removed_compete_for_one_added(self):
        moves = find_moves([_file("Z", *H1_5), _file("X", *H1_5)], [_file("Y", *H1_5)])
        assert moves == {"X": "Y"}

    def test_e_unhashable_never_matched(self):
        removed = [LineHashSequence.unhashable("old/logo.png"), _file("old/a.py", *H1_5)]
        added = [LineHashSequence.unhashable("new/logo.png"), _file("new/a.py", *H1_5)]
        moves = find_moves(removed, added, min_score=0)
        assert moves == {"old/a.py": "new/a.py"}


class TestProperties:
    def test_identity_case_scores_max(self):
        result = detect_moves([_file("a.py", *H1_5)], [_file("b.py", *H1_5)])
        assert result.matches == [Match("a.py", "b.py", MAX_SCORE)]

    def test_disjoint_files_never_match_even_at_zero_threshold(self):
        config = MoveDetectionConfig(min_score=0)
        result = detect_moves([_file("x", "h1", "h2")], [_file("y", "h3", "h4")], config)
        assert result.moves == {}

    def test_threshold_respected(self):
        removed = [_file("r", *H1_5)]
        added = [_file("a", "h1", "h2", "h3", "h4", "h9")]  # scores 80
        assert detect_moves(removed, added, MoveDetectionConfig(min_score=80)).moves == {"r": "a"}
        assert detect_moves(removed, added, MoveDetectionConfig(min_score=81)).moves == {}

    def test_deterministic_and_injective_under_shuffling(self):
        rng = random.Random(42)
        vocab = [f"v{i}" for i in range(25)]
        previous = [
            LineHashSequence.of(f"old/{i}.py", rng.choices(vocab, k=rng.randint(5, 25)))
            for i in range(30)
        ]
        current = [
            LineHashSequence.of(f"new/{i}.py", rng.choices(vocab, k=rng.randint(5, 25)))
            for i in range(30)
        ]
        config = MoveDetectionConfig(min_score=40, min_length_ratio=0.3)
        expected = detect_moves(previous, current, config)

        assert len(set(expected.moves.values())) == len(expected.moves)
        by_key = {f.key: f for f in previous + current}
        for m in expected.matches:
            assert m.score >= 40
            assert score(by_key[m.removed_key], by_key[m.added_key]) == m.score

        for _ in range(5):
            p, c = previous[:], current[:]
            rng.shuffle(p)
            rng.shuffle(c)
            result = detect_moves(p, c, config)
            assert result.matches == expected.matches
            assert list(result.moves.items()) == list(expected.moves.items())

    def test_shared_blank_and_brace_lines_are_not_a_move(self):
        foo = "class Foo {\n\n    int x;\n\n}\n"
        bar = "void bar() {\n\n    return;\n\n}\n"
        previous = [LineHashSequence.of("Foo.java", hash_text(foo))]
        current = [LineHashSequence.of("Bar.java", hash_text(bar))]
        result = detect_moves(previous, current, MoveDetectionConfig(min_score=1))
        assert result.moves == {}
        assert result.unmatched_removed == ["Foo.java"]

    def test_moved_file_with_blank_lines_scores_max(self):
        text = "class Foo {\n\n    int x;\n\n    int y;\n}\n"
        result = detect_moves(
            [LineHashSequence.of("a/Foo.java", hash_text(text))],
            [LineHashSequence.of("b/Foo.java", hash_text(text))],
        )
        assert result.matches == [Match("a/Foo.java", "b/Foo.java", MAX_SCORE)]


class TestDetectMoves:
    def test_files_with_same_key_are_not_candidates(self):
        previous = [_file("kept.py", *H1_5), _file("old.py", "a", "b", "c")]
        current = [_file("kept.py", *H1_5), _file("copy_of_kept.py", *H1_5)]
        result = detect_moves(previous, current)
        assert result.moves == {}
        assert result.unmatched_removed == ["old.py"]
        assert result.unmatched_added == ["copy_of_kept.py"]

    def test_nothing_removed(self):
        result = detect_moves([_file("a", *H1_5)], [_file("a", *H1_5), _file("b", *H1_5)])
        assert result.moves == {}
        assert result.unmatched_added == ["b"]
        assert result.candidate_count == 0

    def test_empty_snapshots(self):
        result = detect_moves([], [])
        assert result.moves == {}
        assert not result.skipped

    def test_unmatched_reporting(self):
        previous = [_file("old/a.py", *H1_5), _file("old/gone.py", "g1", "g2")]
        current = [_file("new/a.py", *H1_5), _file("new/fresh.py", "f1", "f2")]
        result = detect_moves(previous, current)
        assert result.moves == {"old/a.py": "new/a.py"}
        assert result.unmatched_removed == ["old/gone.py"]
        assert result.unmatched_added == ["new/fresh.py"]
        assert result.candidate_count == 2

    def test_max_files_ceiling_skips_detection(self, caplog):
        config = MoveDetectionConfig(max_files=1)
        with caplog.at_level("WARNING", logger="filemove"):
            result = detect_moves([_file("a", *H1_5)], [_file("b", *H1_5)], config)
        assert result.skipped
        assert "max_files=1" in result.skipped_reason
        assert result.moves == {}
        assert result.unmatched_removed == ["a"]
        assert result.unmatched_added == ["b"]
        assert "Move detection skipped" in caplog.text

    def test_custom_matcher_is_used(self):
        class RejectAll(GreedyMatcher):
            def match(self, pairs, min_score):
                return []

        result = detect_moves([_file("a", *H1_5)], [_file("b", *H1_5)], matcher=RejectAll())
        assert result.moves == {}
        assert result.candidate_count == 1

    def test_parallel_config_gives_same_result(self):
        previous = [_file(f"old/{i}", *[f"h{i}-{j}" for j in range(10)]) for i in range(10)]
        current = [_file(f"new/{i}", *[f"h{i}-{j}" for j in range(10)]) for i in range(10)]
        sequential = detect_moves(previous, current)
        parallel = detect_moves(
            previous, current, MoveDetectionConfig(workers=4, parallel_threshold=1)
        )
        assert parallel.moves == sequential.moves
        assert parallel.moves == {f"old/{i}": f"new/{i}" for i in range(10)}


class TestMoveDetector:
    def test_reusable(self):
        detector = MoveDetector(MoveDetectionConfig(min_score=90))
        assert detector.detect([_file("a", *H1_5)], [_file("b", *H1_5)]).moves == {"a": "b"}
        assert detector.detect([_file("c", "x", "y")], [_file("d", "x", "z")]).moves == {}


@pytest.mark.slow
class TestScale:
    def test_thousands_of_files(self):
        rng = random.Random(0)
        previous, current = [], []
        for i in range(500):
            lines = [f"f{i}-l{j}" for j in range(rng.randint(20, 200))]
            previous.append(LineHashSequence.of(f"old/{i}.py", lines))
            edited = lines[:-1] + [f"edit{i}"]
            current.append(LineHashSequence.of(f"new/{i}.py", edited))
        result = detect_moves(previous, current)
        assert result.moves == {f"old/{i}.py": f"new/{i}.py" for i in range(500)}
