import random
from types import SimpleNamespace

from team_shuffle import split_teams, find_team_channels, get_base_name, format_team


def _channel(channel_id, name):
    return SimpleNamespace(id=channel_id, name=name)


def test_split_gives_team1_the_extra_member():
    for size in range(0, 8):
        team1, team2 = split_teams(list(range(size)), random.Random(size))
        assert len(team1) == (size + 1) // 2
        assert len(team2) == size // 2
        assert sorted(team1 + team2) == list(range(size))


def test_base_name():
    assert get_base_name("내전 대기방") == "내전"
    assert get_base_name("로비") == "로비"


def test_find_team_channels():
    waiting = _channel(1, "내전 대기방")
    channels = [waiting, _channel(2, "잡담"), _channel(3, "내전 1팀"), _channel(4, "내전 2팀"), _channel(5, "내전 3팀")]
    team1, team2 = find_team_channels(waiting, channels)
    assert (team1.id, team2.id) == (3, 4)


def test_find_team_channels_not_enough():
    waiting = _channel(1, "내전 대기방")
    assert find_team_channels(waiting, [waiting, _channel(3, "내전 1팀"), _channel(4, "게임")]) is None


def test_format_team():
    assert format_team([], str) == "없음"
    assert format_team(["a", "b"], str.upper) == "A, B"
