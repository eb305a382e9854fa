from types import SimpleNamespace

import pytest

import music_queue
from commands import music_command
from commands.music_command import MusicPlayerView, add_song, remove_songs


class FakeResponse:
    def __init__(self):
        self.sent = []

    def is_done(self):
        return bool(self.sent)

    async def send_message(self, content=None, **kwargs):
        self.sent.append(content)

    async def defer(self, **kwargs):
        pass


class FakeTree:
    def __init__(self):
        self.commands = []

    def add_command(self, command):
        self.commands.append(command)


class FakePlayer:
    def __init__(self, guild_id, playing=False):
        self.guild_id = guild_id
        self.playing = playing
        self.started_index = None
        self.replayed = 0
        self.stopped = 0

    def is_playing(self, guild_id):
        return self.playing

    def is_paused(self, guild_id):
        return False

    async def start(self, channel):
        self.started_index = (await music_queue.load_queue(self.guild_id))['current_index']
        return True

    async def play_current(self, guild_id):
        self.replayed += 1

    async def stop(self, guild_id):
        self.stopped += 1


def _interaction(guild_id, player=None, voice=None, user_id=7):
    return SimpleNamespace(
        guild=SimpleNamespace(id=guild_id, me=None),
        user=SimpleNamespace(id=user_id, voice=voice),
        response=FakeResponse(),
        client=SimpleNamespace(music_player=player),
    )


def _song(name):
    return {'title': name, 'url': f"https://youtu.be/{name}", 'duration': 60, 'added_by': 7}


async def _store(guild_id, names, current=0, is_playing=False):
    await music_queue.store_queue(guild_id, {
        'songs': [_song(n) for n in names], 'current_index': current, 'is_playing': is_playing,
    })


def _music_group():
    tree = FakeTree()
    music_command.music_command(SimpleNamespace(tree=tree))
    return tree.commands[0]


@pytest.mark.parametrize("name", [
    "플레이어", "추가", "재생", "일시정지", "정지", "스킵",
    "목록", "삭제", "다음곡", "이전곡", "나가기", "셔플",
])
async def test_every_subcommand_requires_voice(name, guild_id):
    command = _music_group().get_command(name)
    interaction = _interaction(guild_id)
    if name == "추가":
        await command.callback(interaction, "아이유")
    else:
        await command.callback(interaction)
    assert interaction.response.sent == ["❌ 음성 채널에 먼저 참여해주세요!"]


async def test_missing_speak_permission(guild_id):
    channel = SimpleNamespace(permissions_for=lambda me: SimpleNamespace(connect=True, speak=False))
    interaction = _interaction(guild_id, voice=SimpleNamespace(channel=channel))
    await _music_group().get_command("일시정지").callback(interaction)
    assert interaction.response.sent == ["❌ 해당 음성 채널에 연결하거나 말할 권한이 없습니다."]


async def _fake_lookup(query):
    return {'title': query, 'url': f"https://youtu.be/{query}", 'duration': 30, 'thumbnail': '', 'uploader': "채널"}


async def test_add_after_finished_queue_starts_new_song(db, guild_id, monkeypatch):
    monkeypatch.setattr(music_command, "fetch_song_info", _fake_lookup)
    await _store(guild_id, ["A", "B"], current=1)
    player = FakePlayer(guild_id)

    embed = await add_song(_interaction(guild_id, player), channel=None, query="C")

    assert player.started_index == 2
    assert embed.footer.text == "🎵 재생을 시작합니다!"


async def test_add_to_stopped_queue_keeps_position(db, guild_id, monkeypatch):
    monkeypatch.setattr(music_command, "fetch_song_info", _fake_lookup)
    await _store(guild_id, ["A", "B"], current=0)
    player = FakePlayer(guild_id)

    await add_song(_interaction(guild_id, player), channel=None, query="C")

    assert player.started_index == 0
    assert len((await music_queue.load_queue(guild_id))['songs']) == 3


async def test_add_while_playing_only_queues(db, guild_id, monkeypatch):
    monkeypatch.setattr(music_command, "fetch_song_info", _fake_lookup)
    await _store(guild_id, ["A"], is_playing=True)
    player = FakePlayer(guild_id, playing=True)

    embed = await add_song(_interaction(guild_id, player), channel=None, query="B")

    assert player.started_index is None
    assert embed.fields[-1].value == "2번째"


async def test_remove_playing_song_plays_next(db, guild_id):
    await _store(guild_id, ["A", "B", "C"], current=1, is_playing=True)
    player = FakePlayer(guild_id, playing=True)

    removed = await remove_songs(_interaction(guild_id, player), [1])

    assert [s['title'] for s in removed] == ["B"]
    assert player.replayed == 1
    queue = await music_queue.load_queue(guild_id)
    assert music_queue.current_song(queue)['title'] == "C"


async def test_remove_other_song_keeps_playing(db, guild_id):
    await _store(guild_id, ["A", "B", "C"], current=2, is_playing=True)
    player = FakePlayer(guild_id, playing=True)

    await remove_songs(_interaction(guild_id, player), [0])

    assert player.replayed == 0
    assert (await music_queue.load_queue(guild_id))['current_index'] == 1


async def test_remove_last_song_stops(db, guild_id):
    await _store(guild_id, ["A"], is_playing=True)
    player = FakePlayer(guild_id, playing=True)

    await remove_songs(_interaction(guild_id, player), [0])

    assert player.stopped == 1
    assert player.replayed == 0


async def test_player_buttons_only_for_owner(guild_id):
    view = MusicPlayerView(None, guild_id, owner_id=7)
    voice = SimpleNamespace(channel=SimpleNamespace(id=1))

    other = _interaction(guild_id, voice=voice, user_id=8)
    assert await view.interaction_check(other) is False
    assert other.response.sent == ["❌ 플레이어를 연 사용자만 조작할 수 있습니다."]

    owner = _interaction(guild_id, voice=voice, user_id=7)
    assert await view.interaction_check(owner) is True
