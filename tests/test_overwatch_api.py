import overwatch_api
from overwatch_api import OverwatchError


def test_battletag_helpers():
    assert overwatch_api.is_valid_battletag("플레이어#1234")
    assert not overwatch_api.is_valid_battletag("플레이어1234")
    assert overwatch_api.format_battletag(" Player#1234 ") == "Player-1234"


def test_translations():
    assert overwatch_api.translate_tier("grandmaster") == "그랜드마스터"
    assert overwatch_api.translate_tier("unknown") == "unknown"
    assert overwatch_api.translate_role("damage") == "딜러"
    assert overwatch_api.translate_role("flex") == "flex"


def test_player_embed():
    player = {
        'username': "Player",
        'avatar': "https://example.com/avatar.png",
        'namecard': "https://example.com/card.png",
        'endorsement': {'level': 3},
        'competitive': {'pc': {
            'season': 9,
            'tank': {'division': "diamond", 'tier': 2},
            'support': {'division': "gold", 'tier': 5},
        }},
    }
    embed = overwatch_api.build_player_embed(player, "Player#1234")
    assert embed.title == "🎮 Player의 오버워치 전적"
    fields = {field.name: field.value for field in embed.fields}
    assert fields["👍 추천 레벨"] == "3레벨"
    assert fields["🏆 경쟁전 티어"] == "**탱커**: 다이아몬드 2\n**서포터**: 골드 5"
    assert fields["📅 시즌"] == "시즌 9"
    assert embed.image.url == "https://example.com/card.png"
    assert embed.thumbnail.url == "https://example.com/avatar.png"


def test_private_profile_embed_has_no_competitive_fields():
    embed = overwatch_api.build_player_embed({'username': "Player", 'competitive': None}, "Player#1234")
    assert embed.fields == []


def test_error_messages():
    assert "5초 후" in overwatch_api.describe_error(OverwatchError("API has been rate limited"))
    assert "플레이어를 찾을 수 없습니다" in overwatch_api.describe_error(OverwatchError("Player not found"))
    assert "플레이어를 찾을 수 없습니다" in overwatch_api.describe_error(OverwatchError("error (404)"))
    assert overwatch_api.describe_error(OverwatchError("Blizzard server error")) == "Blizzard server error"
    assert overwatch_api.describe_error(OverwatchError("")) == "알 수 없는 오류가 발생했습니다"


def test_error_embed_has_help_field():
    embed = overwatch_api.build_error_embed(OverwatchError("Player not found"))
    assert embed.title == "❌ 전적 조회 실패"
    assert embed.fields[0].name == "💡 도움말"
