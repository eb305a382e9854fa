# overwatch_api.py - 오버워치 전적 조회 (OverFast API)

import aiohttp
import discord

from config import OVERFAST_API_URL, HTTP_TIMEOUT
from utils import now_kst

TIER_NAMES = {
    'bronze': '브론즈',
    'silver': '실버',
    'gold': '골드',
    'platinum': '플래티넘',
    'diamond': '다이아몬드',
    'master': '마스터',
    'grandmaster': '그랜드마스터',
    'champion': '챔피언',
}

ROLE_NAMES = {
    'tank': '탱커',
    'damage': '딜러',
    'support': '서포터',
}

OVERWATCH_COLOR = 0xf99e1a
FOOTER_ICON_URL = "https://static.playoverwatch.com/img/pages/career/icons/role/tank-f64702b684.svg"


class OverwatchError(Exception):
    """전적 조회 실패 (API 오류 메시지 포함)"""


def is_valid_battletag(battletag: str) -> bool:
    return '#' in (battletag or "")


def format_battletag(battletag: str) -> str:
    """API 경로용 배틀태그 (# -> -)"""
    return battletag.strip().replace('#', '-', 1)


def translate_tier(division: str) -> str:
    return TIER_NAMES.get(division, division)


def translate_role(role: str) -> str:
    return ROLE_NAMES.get(role, role)


async def fetch_player_summary(battletag: str) -> dict:
    """플레이어 요약 정보 조회"""
    url = f"{OVERFAST_API_URL}/players/{format_battletag(battletag)}/summary"
    timeout = aiohttp.ClientTimeout(total=HTTP_TIMEOUT)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(url) as response:
            try:
                data = await response.json(content_type=None)
            except (aiohttp.ContentTypeError, ValueError):
                data = {}
            if response.status >= 400:
                message = (data or {}).get('error') or f"플레이어 정보를 가져올 수 없습니다 ({response.status})"
                if response.status == 404 and 'not found' not in message.lower():
                    message = f"{message} (404)"
                raise OverwatchError(message)
            return data


def build_player_embed(player: dict, battletag: str) -> discord.Embed:
    """플레이어 전적 임베드"""
    embed = discord.Embed(
        title=f"🎮 {player.get('username', battletag)}의 오버워치 전적",
        description=f"배틀태그: **{battletag}**",
        color=OVERWATCH_COLOR,
        timestamp=now_kst()
    )
    if player.get('avatar'):
        embed.set_thumbnail(url=player['avatar'])

    endorsement = player.get('endorsement')
    if endorsement:
        embed.add_field(name="👍 추천 레벨", value=f"{endorsement.get('level', 0)}레벨", inline=True)

    competitive = (player.get('competitive') or {}).get('pc')
    if competitive:
        lines = []
        for role in ROLE_NAMES:
            role_data = competitive.get(role)
            if role_data:
                lines.append(
                    f"**{translate_role(role)}**: {translate_tier(role_data.get('division'))} {role_data.get('tier')}"
                )
        if lines:
            embed.add_field(name="🏆 경쟁전 티어", value="\n".join(lines), inline=False)
        if competitive.get('season'):
            embed.add_field(name="📅 시즌", value=f"시즌 {competitive['season']}", inline=True)

    if player.get('namecard'):
        embed.set_image(url=player['namecard'])

    embed.set_footer(text="Overfast API 제공", icon_url=FOOTER_ICON_URL)
    return embed


def describe_error(error: Exception) -> str:
    """오류를 사용자에게 보여줄 문구로 변환"""
    message = str(error)
    lowered = message.lower()
    if 'rate limited' in lowered:
        return "API 요청 한도가 초과되었습니다. 5초 후 다시 시도해주세요"
    if 'not found' in lowered or '404' in lowered:
        return "플레이어를 찾을 수 없습니다. 배틀태그를 확인해주세요"
    return message or "알 수 없는 오류가 발생했습니다"


def build_error_embed(error: Exception) -> discord.Embed:
    embed = discord.Embed(
        title="❌ 전적 조회 실패",
        description=describe_error(error),
        color=discord.Color.red()
    )
    embed.add_field(
        name="💡 도움말",
        value="• 배틀태그가 정확한지 확인해주세요\n• 프로필이 공개로 설정되어 있는지 확인해주세요\n• 잠시 후 다시 시도해주세요",
        inline=False
    )
    return embed
