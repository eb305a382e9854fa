import pytest

import league_manager
from league_manager import LeagueError


async def test_create_and_list_team(db, guild_id):
    assert await league_manager.create_team(guild_id, "  레드팀 ") == "레드팀"
    teams = await league_manager.get_teams(guild_id)
    assert len(teams) == 1
    team = teams[0]
    assert team['team_name'] == "레드팀"
    assert team['score'] == 0
    assert team['members'] == []
    assert team['voice_channel_id'] is None
    assert team['captain_id'] is None


async def test_duplicate_team_name(db, guild_id):
    await league_manager.create_team(guild_id, "레드팀")
    with pytest.raises(LeagueError):
        await league_manager.create_team(guild_id, "레드팀")


async def test_blank_team_name(db, guild_id):
    with pytest.raises(LeagueError):
        await league_manager.create_team(guild_id, "   ")


async def test_team_limit(db, guild_id):
    for i in range(league_manager.MAX_SELECT_OPTIONS):
        await league_manager.create_team(guild_id, f"팀{i}")
    with pytest.raises(LeagueError):
        await league_manager.create_team(guild_id, "한팀더")


async def test_score_changes(db, guild_id):
    await league_manager.create_team(guild_id, "레드팀")
    assert await league_manager.change_score(guild_id, "레드팀", 10) == 10
    assert await league_manager.change_score(guild_id, "레드팀", -3) == 7


async def test_score_on_missing_team(db, guild_id):
    with pytest.raises(LeagueError):
        await league_manager.change_score(guild_id, "없는팀", 5)


def test_parse_score():
    assert league_manager.parse_score(" 15 ") == 15
    assert league_manager.parse_score("-2") == -2
    with pytest.raises(LeagueError):
        league_manager.parse_score("열")
    with pytest.raises(LeagueError):
        league_manager.parse_score("")


async def test_members_captain_and_channel(db, guild_id):
    await league_manager.create_team(guild_id, "레드팀")
    await league_manager.add_members(guild_id, "레드팀", [1, 2, 2])
    await league_manager.set_captain(guild_id, "레드팀", 3)
    await league_manager.set_voice_channel(guild_id, "레드팀", 555)

    team = await league_manager.get_team(guild_id, "레드팀")
    assert team['members'] == [1, 2, 3]
    assert team['captain_id'] == 3
    assert team['voice_channel_id'] == 555


async def test_delete_and_reset(db, guild_id):
    await league_manager.create_team(guild_id, "레드팀")
    await league_manager.create_team(guild_id, "블루팀")
    await league_manager.add_members(guild_id, "레드팀", [1])

    await league_manager.delete_team(guild_id, "레드팀")
    assert [t['team_name'] for t in await league_manager.get_teams(guild_id)] == ["블루팀"]
    with pytest.raises(LeagueError):
        await league_manager.delete_team(guild_id, "레드팀")

    await league_manager.reset_teams(guild_id)
    assert await league_manager.get_teams(guild_id) == []


async def _two_teams_with_captains(guild_id):
    await league_manager.create_team(guild_id, "레드팀")
    await league_manager.create_team(guild_id, "블루팀")
    await league_manager.set_captain(guild_id, "레드팀", 10)
    await league_manager.set_captain(guild_id, "블루팀", 20)


async def test_banpick_requires_captains(db, guild_id):
    await league_manager.create_team(guild_id, "레드팀")
    await league_manager.create_team(guild_id, "블루팀")
    await league_manager.set_captain(guild_id, "레드팀", 10)
    with pytest.raises(LeagueError):
        await league_manager.start_banpick(guild_id, 1, ["레드팀", "블루팀"])


async def test_banpick_requires_two_distinct_teams(db, guild_id):
    await _two_teams_with_captains(guild_id)
    with pytest.raises(LeagueError):
        await league_manager.start_banpick(guild_id, 1, ["레드팀"])
    with pytest.raises(LeagueError):
        await league_manager.start_banpick(guild_id, 1, ["레드팀", "레드팀"])


async def test_banpick_flow(db, guild_id):
    await _two_teams_with_captains(guild_id)
    teams = await league_manager.start_banpick(guild_id, 1, ["레드팀", "블루팀"])
    assert teams == {"레드팀": {'captain': 10}, "블루팀": {'captain': 20}}

    with pytest.raises(LeagueError):
        await league_manager.start_banpick(guild_id, 1, ["레드팀", "블루팀"])

    await league_manager.set_session_message(guild_id, 777)
    session = await league_manager.get_session(guild_id)
    assert session['message_id'] == 777
    assert league_manager.find_captain_team(session, 20) == "블루팀"
    assert league_manager.find_captain_team(session, 30) is None

    assert await league_manager.submit_banpick(guild_id, 10, " 겐지 ") == ("레드팀", 1)
    with pytest.raises(LeagueError, match="이미 밴픽을 입력하셨습니다"):
        await league_manager.submit_banpick(guild_id, 10, "트레이서")
    with pytest.raises(LeagueError):
        await league_manager.submit_banpick(guild_id, 30, "메르시")

    assert await league_manager.submit_banpick(guild_id, 20, "위도우메이커") == ("블루팀", 2)
    session = await league_manager.get_session(guild_id)
    assert session['banpicks'] == {"레드팀": "겐지", "블루팀": "위도우메이커"}

    await league_manager.finish_banpick(guild_id)
    session = await league_manager.get_session(guild_id)
    assert session['is_active'] is False
    with pytest.raises(LeagueError):
        await league_manager.submit_banpick(guild_id, 20, "리퍼")

    await league_manager.clear_banpick(guild_id)
    assert await league_manager.get_session(guild_id) is None


async def test_banpick_rejects_shared_captain(db, guild_id):
    await league_manager.create_team(guild_id, "레드팀")
    await league_manager.create_team(guild_id, "블루팀")
    await league_manager.set_captain(guild_id, "레드팀", 10)
    await league_manager.set_captain(guild_id, "블루팀", 10)
    with pytest.raises(LeagueError, match="팀장이 같습니다"):
        await league_manager.start_banpick(guild_id, 1, ["레드팀", "블루팀"])
    assert await league_manager.get_session(guild_id) is None


async def test_finish_banpick_only_once(db, guild_id):
    await _two_teams_with_captains(guild_id)
    await league_manager.start_banpick(guild_id, 1, ["레드팀", "블루팀"])
    assert await league_manager.finish_banpick(guild_id) is True
    assert await league_manager.finish_banpick(guild_id) is False
