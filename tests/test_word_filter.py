import json

from word_filter import load_bad_words, contains_bad_word


def test_load_bad_words(tmp_path):
    path = tmp_path / "badwords.json"
    path.write_text(json.dumps({"badWords": ["나쁜말", "욕"]}, ensure_ascii=False), encoding="utf-8")
    assert load_bad_words(str(path)) == {"나쁜말", "욕"}


def test_missing_file_is_empty(tmp_path):
    assert load_bad_words(str(tmp_path / "none.json")) == set()


def test_broken_file_is_empty(tmp_path):
    path = tmp_path / "badwords.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_bad_words(str(path)) == set()


def test_contains_bad_word_matches_whole_words():
    words = {"나쁜말"}
    assert contains_bad_word("이건 나쁜말 이야", words)
    assert not contains_bad_word("이건나쁜말이야", words)
    assert not contains_bad_word("", words)
