import asyncio
from types import SimpleNamespace

import pytest

import league_manager
from commands import league_command
from commands.league_command import handle_banpick_dm

CHANNEL_ID = 5
MESSAGE_ID = 777


class FakeProgressMessage:
    def __init__(self):
        self.embeds = []

    async def edit(self, embed=None, view=None):
        self.embeds.append(embed)


class FakeDM:
    def __init__(self, author_id, content):
        self.author = SimpleNamespace(id=author_id)
        self.content = content
        self.replies = []

    async def reply(self, text):
        self.replies.append(text)


@pytest.fixture
def sleeps(monkeypatch):
    calls = []

    async def fake_sleep(seconds):
        calls.append(seconds)

    monkeypatch.setattr(league_command.asyncio, "sleep", fake_sleep)
    return calls


@pytest.fixture
def progress():
    return FakeProgressMessage()


@pytest.fixture
def bot(guild_id, progress):
    async def fetch_message(message_id):
        assert message_id == MESSAGE_ID
        return progress

    channel = SimpleNamespace(fetch_message=fetch_message)
    other_guild = SimpleNamespace(id=222, get_channel=lambda channel_id: None)
    guild = SimpleNamespace(id=guild_id, get_channel=lambda channel_id: channel if channel_id == CHANNEL_ID else None)
    return SimpleNamespace(guilds=[other_guild, guild])


async def _start_session(guild_id):
    await league_manager.create_team(guild_id, "레드팀")
    await league_manager.create_team(guild_id, "블루팀")
    await league_manager.set_captain(guild_id, "레드팀", 10)
    await league_manager.set_captain(guild_id, "블루팀", 20)
    await league_manager.start_banpick(guild_id, CHANNEL_ID, ["레드팀", "블루팀"])
    await league_manager.set_session_message(guild_id, MESSAGE_ID)


async def test_dm_from_non_captain_is_ignored(db, guild_id, bot, progress):
    await _start_session(guild_id)
    dm = FakeDM(30, "겐지")
    assert await handle_banpick_dm(bot, dm) is False
    assert dm.replies == []
    assert progress.embeds == []


async def test_dm_without_session_is_ignored(db, bot):
    assert await handle_banpick_dm(bot, FakeDM(10, "겐지")) is False


async def test_full_banpick_flow(db, guild_id, bot, progress, sleeps):
    await _start_session(guild_id)

    first = FakeDM(10, " 겐지 ")
    assert await handle_banpick_dm(bot, first) is True
    assert first.replies == ["✅ \"겐지\"이(가) 밴픽으로 등록되었습니다!"]
    assert "(1/2)" in progress.embeds[-1].fields[1].value

    again = FakeDM(10, "트레이서")
    assert await handle_banpick_dm(bot, again) is True
    assert again.replies == ["⚠️ 이미 밴픽을 입력하셨습니다."]

    second = FakeDM(20, "위도우메이커")
    assert await handle_banpick_dm(bot, second) is True

    countdown = [e.description for e in progress.embeds if e.title == "⚔️ 밴픽 완료!"]
    assert len(countdown) == 3
    assert "3초" in countdown[0]
    assert "2초" in countdown[1]
    assert "1초" in countdown[2]
    assert sleeps == [1, 1, 1]

    result = progress.embeds[-1]
    assert result.title == "🎉 밴픽 결과 발표!"
    assert [(f.name, f.value) for f in result.fields] == [
        ("레드팀 팀 밴픽", "🚫 **겐지**"),
        ("블루팀 팀 밴픽", "🚫 **위도우메이커**"),
    ]
    assert await league_manager.get_session(guild_id) is None


async def test_simultaneous_dms_announce_once(db, guild_id, bot, progress, sleeps):
    await _start_session(guild_id)

    handled = await asyncio.gather(
        handle_banpick_dm(bot, FakeDM(10, "겐지")),
        handle_banpick_dm(bot, FakeDM(20, "위도우메이커")),
    )

    assert handled == [True, True]
    assert sleeps == [1, 1, 1]
    results = [e for e in progress.embeds if e.title == "🎉 밴픽 결과 발표!"]
    assert len(results) == 1
    assert "🚫 **-**" not in [f.value for f in results[0].fields]
    assert await league_manager.get_session(guild_id) is None
