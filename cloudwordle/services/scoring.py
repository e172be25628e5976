"""
Scoring Engine

Implements the authentic Wordle letter evaluation algorithm and the
keyboard-aggregate status tracking derived from it.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from ..models.game import LetterStatus

_KEY_PRIORITY = {
    LetterStatus.ABSENT: 0,
    LetterStatus.PRESENT: 1,
    LetterStatus.CORRECT: 2,
}


def score(guess: str, target: str) -> List[LetterStatus]:
    """
    Evaluates a guess against the target word.

    Exact matches are resolved first and remove their letter from the pool,
    so a repeated guess letter is only credited as many times as the target
    still has that letter left.

    Args:
        guess: Uppercase guess
        target: Uppercase target word of the same length

    Returns:
        List[LetterStatus]: One status per guess position

    Raises:
        ValueError: If guess and target differ in length
    """
    if len(guess) != len(target):
        raise ValueError(f"Guess length {len(guess)} does not match target length {len(target)}")

    result: List[Optional[LetterStatus]] = [None] * len(guess)

    # Working copy of the target to track letter consumption
    target_chars: List[Optional[str]] = list(target)

    # First pass: exact position matches
    for i, letter in enumerate(guess):
        if letter == target_chars[i]:
            result[i] = LetterStatus.CORRECT
            target_chars[i] = None

    # Second pass: present letters and misses against the remaining pool
    for i, letter in enumerate(guess):
        if result[i] is not None:
            continue
        if letter in target_chars:
            result[i] = LetterStatus.PRESENT
            target_chars[target_chars.index(letter)] = None
        else:
            result[i] = LetterStatus.ABSENT

    return [status for status in result if status is not None]


def upgrade_key_status(current: Optional[LetterStatus], new: LetterStatus) -> LetterStatus:
    """Keyboard status only ever moves absent -> present -> correct."""
    if current is None or _KEY_PRIORITY[new] > _KEY_PRIORITY[current]:
        return new
    return current


def aggregate_key_status(history: Iterable[Tuple[str, Sequence[LetterStatus]]]) -> Dict[str, LetterStatus]:
    """
    Folds every scored row into the per-letter keyboard view.

    Letters that were never guessed are absent from the result.
    """
    keyboard: Dict[str, LetterStatus] = {}
    for guess, statuses in history:
        for letter, status in zip(guess, statuses):
            keyboard[letter] = upgrade_key_status(keyboard.get(letter), status)
    return keyboard
