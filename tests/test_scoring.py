import itertools
import random
import pytest
from cloudwordle.models.game import LetterStatus
from cloudwordle.services.scoring import aggregate_key_status, score, upgrade_key_status

C, P, A = LetterStatus.CORRECT, LetterStatus.PRESENT, LetterStatus.ABSENT


def test_exact_match_is_all_correct():
    assert score("CRANE", "CRANE") == [C] * 5


def test_no_shared_letters_is_all_absent():
    assert score("PIZZA", "STORM") == [A] * 5


def test_duplicate_letters_are_consumed():
    # Exact matches take their letters first; leftovers only match what remains
    assert score("AABBB", "ABABA") == [C, P, P, C, A]


def test_exact_match_is_reserved_before_present():
    # The last E is exact; only one E is left for the other two
    assert score("EERIE", "THREE") == [P, A, C, A, C]


def test_length_mismatch_raises():
    with pytest.raises(ValueError):
        score("CRAN", "CRANE")


def _assert_within_target_counts(guess, target):
    statuses = score(guess, target)
    assert len(statuses) == len(guess)
    for letter in set(guess):
        credited = sum(
            1 for g, status in zip(guess, statuses)
            if g == letter and status in (C, P)
        )
        assert credited <= target.count(letter)
        # Every occurrence the target still has must be credited
        assert credited == min(guess.count(letter), target.count(letter))


def test_marks_never_exceed_target_occurrences_small_alphabet():
    words = ["".join(letters) for letters in itertools.product("AB", repeat=5)]
    for guess in words:
        for target in words:
            _assert_within_target_counts(guess, target)


def test_marks_never_exceed_target_occurrences_random():
    rng = random.Random(1234)
    for _ in range(2000):
        guess = "".join(rng.choice("ABCDE") for _ in range(5))
        target = "".join(rng.choice("ABCDE") for _ in range(5))
        _assert_within_target_counts(guess, target)


def test_key_status_only_upgrades():
    assert upgrade_key_status(None, A) is A
    assert upgrade_key_status(A, P) is P
    assert upgrade_key_status(P, C) is C
    assert upgrade_key_status(C, A) is C
    assert upgrade_key_status(C, P) is C
    assert upgrade_key_status(P, A) is P


def test_aggregate_keeps_strongest_status_per_letter():
    history = [
        ("SLATE", tuple(score("SLATE", "CRANE"))),
        ("CRANE", tuple(score("CRANE", "CRANE"))),
        ("LEAST", tuple(score("LEAST", "CRANE"))),
    ]
    keyboard = aggregate_key_status(history)
    assert keyboard["A"] is C
    assert keyboard["E"] is C
    assert keyboard["S"] is A
    assert keyboard["L"] is A
    assert "Q" not in keyboard
