# steam_utils.py - 스팀 Web API 조회

from datetime import datetime
from typing import Dict, List, Optional

import aiohttp

from config import STEAM_API_KEY, STEAM_API_URL, STEAM_TRACKED_GAMES, HTTP_TIMEOUT
from utils import KST

NOT_OWNED_PLAY_TIME = "0시간 0분"
NOT_OWNED_LAST_PLAYED = "0000-00-00"


class SteamError(Exception):
    """스팀 조회 실패"""


def format_play_time(minutes: int) -> str:
    """분 단위 플레이 시간을 'H시간 M분'으로 변환"""
    minutes = int(minutes or 0)
    return f"{minutes // 60}시간 {minutes % 60}분"


def format_last_played(timestamp: int) -> str:
    """유닉스 시간을 'YYYY. MM. DD.' 형식으로 변환"""
    if not timestamp:
        return NOT_OWNED_LAST_PLAYED
    date = datetime.fromtimestamp(int(timestamp), KST)
    return date.strftime("%Y. %m. %d.")


def build_game_info(games: List[dict], app_id: int) -> Dict[str, str]:
    """보유 게임 목록에서 특정 게임의 플레이 정보 추출"""
    for game in games:
        if game.get('appid') == app_id:
            return {
                'play_time': format_play_time(game.get('playtime_forever', 0)),
                'last_played': format_last_played(game.get('rtime_last_played', 0)),
            }
    return {'play_time': NOT_OWNED_PLAY_TIME, 'last_played': NOT_OWNED_LAST_PLAYED}


async def _get_json(session: aiohttp.ClientSession, path: str, params: dict) -> dict:
    params = dict(params, key=STEAM_API_KEY, format="json")
    async with session.get(f"{STEAM_API_URL}{path}", params=params) as response:
        if response.status >= 400:
            body = await response.text()
            print(f"[Steam] 요청 실패 {response.status} {path}: {body[:200]}")
            raise SteamError("스팀 API 요청에 실패했습니다.")
        return await response.json(content_type=None)


async def resolve_steam_id(session: aiohttp.ClientSession, vanity: str) -> str:
    """커스텀 URL 아이디를 64비트 SteamID로 변환"""
    vanity = (vanity or "").strip()
    if vanity.isdigit() and len(vanity) == 17:
        return vanity
    try:
        data = await _get_json(session, "/ISteamUser/ResolveVanityURL/v1/", {'vanityurl': vanity})
    except (SteamError, aiohttp.ClientError) as e:
        print(f"[Steam] 유효하지 않은 Steam ID입니다: {vanity} ({e})")
        raise SteamError("Steam ID를 확인해주세요.")
    result = data.get('response', {})
    if result.get('success') != 1 or not result.get('steamid'):
        print(f"[Steam] 유효하지 않은 Steam ID입니다: {vanity}")
        raise SteamError("Steam ID를 확인해주세요.")
    return result['steamid']


async def get_owned_games(session: aiohttp.ClientSession, steam_id: str) -> List[dict]:
    """보유 게임 목록 (비공개 프로필이면 빈 목록)"""
    data = await _get_json(session, "/IPlayerService/GetOwnedGames/v1/", {
        'steamid': steam_id,
        'include_played_free_games': 1,
    })
    return data.get('response', {}).get('games', []) or []


async def fetch_steam_profile(vanity: str, tracked_games: Optional[Dict[int, str]] = None) -> dict:
    """
    스팀 정보 조회
    Returns: {'steam_id', 'game_count', 'games': [{'name', 'play_time', 'last_played'}]}
    """
    if not STEAM_API_KEY:
        raise SteamError("STEAM_API_KEY가 설정되지 않았습니다.")
    if tracked_games is None:
        tracked_games = STEAM_TRACKED_GAMES

    timeout = aiohttp.ClientTimeout(total=HTTP_TIMEOUT)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        steam_id = await resolve_steam_id(session, vanity)
        games = await get_owned_games(session, steam_id)

    tracked = []
    for app_id, name in tracked_games.items():
        info = build_game_info(games, app_id)
        tracked.append({'name': name, **info})

    return {'steam_id': steam_id, 'game_count': len(games), 'games': tracked}
