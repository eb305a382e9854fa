from commands.league_command import (
    build_team_list_embed, build_banpick_progress_embed, build_banpick_result_embed,
)
from commands.music_command import build_player_embed, build_queue_embed, build_removed_embed


def _queue(count, current=0):
    songs = [
        {'title': f"노래{i}", 'url': f"https://youtu.be/{i}", 'duration': 90, 'thumbnail': "", 'added_by': 7}
        for i in range(count)
    ]
    return {'songs': songs, 'current_index': current, 'is_playing': True}


def test_empty_team_list():
    assert build_team_list_embed([]).description == "등록된 팀이 없습니다."


def test_team_list_fields():
    embed = build_team_list_embed([{
        'team_name': "레드팀", 'score': 5, 'members': [1, 2], 'voice_channel_id': None, 'captain_id': 1,
    }])
    value = embed.fields[0].value
    assert "5점" in value
    assert "<@1>, <@2>" in value
    assert "**음성채널:** 설정 안됨" in value


def test_banpick_embeds():
    progress = build_banpick_progress_embed(["레드팀", "블루팀"], 1)
    assert "(1/2)" in progress.fields[1].value
    result = build_banpick_result_embed(["레드팀", "블루팀"], {"레드팀": "겐지", "블루팀": "한조"})
    assert [f.value for f in result.fields] == ["🚫 **겐지**", "🚫 **한조**"]


def test_player_embed_for_empty_queue():
    embed = build_player_embed({'songs': [], 'current_index': 0, 'is_playing': False}, 'stopped')
    assert "비어있습니다" in embed.description


def test_player_embed_shows_position_and_status():
    embed = build_player_embed(_queue(3, current=1), 'paused')
    assert embed.description.startswith("⏸️")
    fields = {f.name: f.value for f in embed.fields}
    assert fields["📋 큐 정보"] == "2 / 3곡"
    assert fields["⏱️ 재생 시간"] == "1:30"


def test_queue_embed_pages():
    queue = _queue(23, current=12)
    first = build_queue_embed(queue, 0)
    assert first.footer.text == "페이지 1/3 | 총 23곡"
    assert first.description.count("\n") == 9
    second = build_queue_embed(queue, 1)
    assert "▶️ `13.`" in second.description
    assert build_queue_embed(queue, 99).footer.text == "페이지 3/3 | 총 23곡"


def test_removed_summary_caps_titles():
    removed = [{'title': f"노래{i}"} for i in range(7)]
    lines = build_removed_embed(removed).description.split("\n")
    assert len(lines) == 6
    assert lines[-1] == "외 2곡"
