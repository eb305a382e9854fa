import pytest

import steam_utils
from steam_utils import SteamError


def test_format_play_time():
    assert steam_utils.format_play_time(0) == "0시간 0분"
    assert steam_utils.format_play_time(59) == "0시간 59분"
    assert steam_utils.format_play_time(125) == "2시간 5분"


def test_format_last_played_in_kst():
    # 2023-11-14 22:13:20 UTC
    assert steam_utils.format_last_played(1700000000) == "2023. 11. 15."
    assert steam_utils.format_last_played(0) == "0000-00-00"


def test_game_info_for_owned_and_missing_games():
    games = [{'appid': 578080, 'playtime_forever': 61, 'rtime_last_played': 1700000000}]
    assert steam_utils.build_game_info(games, 578080) == {'play_time': "1시간 1분", 'last_played': "2023. 11. 15."}
    assert steam_utils.build_game_info(games, 1568590) == {'play_time': "0시간 0분", 'last_played': "0000-00-00"}


async def test_resolve_vanity(monkeypatch):
    async def fake_get_json(session, path, params):
        assert params['vanityurl'] == "gabelogannewell"
        return {'response': {'success': 1, 'steamid': "76561197960287930"}}

    monkeypatch.setattr(steam_utils, "_get_json", fake_get_json)
    assert await steam_utils.resolve_steam_id(None, " gabelogannewell ") == "76561197960287930"


async def test_resolve_unknown_vanity(monkeypatch):
    async def fake_get_json(session, path, params):
        return {'response': {'success': 42, 'message': "No match"}}

    monkeypatch.setattr(steam_utils, "_get_json", fake_get_json)
    with pytest.raises(SteamError, match="Steam ID를 확인해주세요."):
        await steam_utils.resolve_steam_id(None, "nobody")


async def test_numeric_steam_id_skips_lookup(monkeypatch):
    async def fail(*args):
        raise AssertionError("should not be called")

    monkeypatch.setattr(steam_utils, "_get_json", fail)
    assert await steam_utils.resolve_steam_id(None, "76561197960287930") == "76561197960287930"


async def test_profile_requires_api_key(monkeypatch):
    monkeypatch.setattr(steam_utils, "STEAM_API_KEY", None)
    with pytest.raises(SteamError):
        await steam_utils.fetch_steam_profile("someone")
