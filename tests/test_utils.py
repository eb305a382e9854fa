from types import SimpleNamespace

from utils import format_duration, get_display_name, now_kst


def test_format_duration():
    assert format_duration(0) == "0:00"
    assert format_duration(None) == "0:00"
    assert format_duration(65) == "1:05"
    assert format_duration(3725) == "1:02:05"


def test_display_name_priority():
    assert get_display_name(SimpleNamespace(nick="닉", global_name="전역", name="이름")) == "닉"
    assert get_display_name(SimpleNamespace(nick=None, global_name="전역", name="이름")) == "전역"
    assert get_display_name(SimpleNamespace(name="이름")) == "이름"
    assert get_display_name(SimpleNamespace()) == "신원미상"


def test_now_kst_offset():
    assert now_kst().utcoffset().total_seconds() == 9 * 3600
