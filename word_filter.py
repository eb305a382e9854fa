# word_filter.py - 욕설 감지 (badwords.json)

import json
import os
from typing import Optional, Set

from config import BAD_WORDS_FILE

WARNING_MESSAGE = "욕하지 마세염!"

_bad_words: Optional[Set[str]] = None


def load_bad_words(path: str = BAD_WORDS_FILE) -> Set[str]:
    """파일에서 {"badWords": [...]} 로드"""
    if not os.path.exists(path):
        print(f"[WordFilter] {path} 파일이 없습니다.")
        return set()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except Exception as e:
        print(f"[WordFilter] 로드 오류: {e}")
        return set()
    words = data.get("badWords", []) if isinstance(data, dict) else []
    return {str(word) for word in words if word}


def get_bad_words() -> Set[str]:
    global _bad_words
    if _bad_words is None:
        _bad_words = load_bad_words()
    return _bad_words


def contains_bad_word(text: str, bad_words: Optional[Set[str]] = None) -> bool:
    """공백으로 나눈 단어 중 금지어가 있는지"""
    if bad_words is None:
        bad_words = get_bad_words()
    return any(word in bad_words for word in (text or "").split(" "))
