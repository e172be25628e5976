"""
Dictionary Service

Word-validity predicate consulted before a guess is scored.
"""

import json
from pathlib import Path
from typing import Iterable, Optional
from ..config.game_settings import WORD_LIST, WORD_LENGTH


class WordListValidator:
    """
    Accepts any word from the target list plus an optional allowed-words file.

    The file may be a JSON array or plain text with one word per line.
    """

    def __init__(self, words: Iterable[str] = WORD_LIST,
                 allowed_words_file: Optional[str] = None,
                 word_length: int = WORD_LENGTH):
        self.word_length = word_length
        self.words = {word.strip().upper() for word in words}
        if allowed_words_file:
            self.words.update(self._load_file(Path(allowed_words_file)))

    def _load_file(self, path: Path) -> set:
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix == '.json':
                entries = json.load(f)
                if not isinstance(entries, list):
                    raise ValueError(f"{path} must contain an array of words")
            else:
                entries = f.read().split()
        return {
            str(word).strip().upper()
            for word in entries
            if len(str(word).strip()) == self.word_length and str(word).strip().isalpha()
        }

    def is_valid_word(self, word: str) -> bool:
        if not isinstance(word, str):
            return False
        return word.strip().upper() in self.words
