# league_manager.py - 리그 팀/점수/밴픽 관리

from typing import Dict, List, Optional, Tuple

from database import (
    get_league_teams, create_league_team, delete_league_team, delete_all_league_teams,
    add_league_score, add_league_members, update_league_team,
    get_banpick_session, create_banpick_session, update_banpick_session,
    deactivate_banpick_session, add_banpick_entry, remove_banpick_session,
)

MAX_TEAM_NAME_LENGTH = 100  # 선택 메뉴 라벨 최대 길이
MAX_SELECT_OPTIONS = 25
BANPICK_TEAM_COUNT = 2


class LeagueError(Exception):
    """리그 처리 중 사용자에게 보여줄 오류"""


def validate_team_name(team_name: str) -> str:
    """팀 이름 검증 후 공백 제거된 이름 반환"""
    name = (team_name or "").strip()
    if not name:
        raise LeagueError("팀 이름을 입력해주세요.")
    if len(name) > MAX_TEAM_NAME_LENGTH:
        raise LeagueError(f"팀 이름은 {MAX_TEAM_NAME_LENGTH}자 이하로 입력해주세요.")
    return name


def parse_score(text: str) -> int:
    """점수 입력 파싱 (정수만 허용)"""
    try:
        return int((text or "").strip())
    except ValueError:
        raise LeagueError("올바른 숫자를 입력해주세요.")


async def get_teams(guild_id: int) -> List[dict]:
    """서버의 팀 목록"""
    return await get_league_teams(guild_id)


async def get_team(guild_id: int, team_name: str) -> Optional[dict]:
    """팀 하나 조회"""
    for team in await get_league_teams(guild_id):
        if team['team_name'] == team_name:
            return team
    return None


async def create_team(guild_id: int, team_name: str) -> str:
    """팀 생성. 이미 존재하면 LeagueError"""
    name = validate_team_name(team_name)
    teams = await get_league_teams(guild_id)
    if len(teams) >= MAX_SELECT_OPTIONS:
        raise LeagueError(f"팀은 최대 {MAX_SELECT_OPTIONS}개까지 만들 수 있습니다.")
    if not await create_league_team(guild_id, name):
        raise LeagueError(f"이미 존재하는 팀 이름입니다: {name}")
    print(f"[League] guild={guild_id} 팀 생성: {name}")
    return name


async def delete_team(guild_id: int, team_name: str):
    """팀 삭제"""
    if not await delete_league_team(guild_id, team_name):
        raise LeagueError(f"팀 \"{team_name}\"을(를) 찾을 수 없습니다.")
    print(f"[League] guild={guild_id} 팀 삭제: {team_name}")


async def reset_teams(guild_id: int):
    """모든 팀 초기화"""
    await delete_all_league_teams(guild_id)
    print(f"[League] guild={guild_id} 전체 초기화")


async def change_score(guild_id: int, team_name: str, delta: int) -> int:
    """점수 추가(양수)/차감(음수). Returns: 변경 후 점수"""
    score = await add_league_score(guild_id, team_name, delta)
    if score is None:
        raise LeagueError(f"팀 \"{team_name}\"을(를) 찾을 수 없습니다.")
    return score


async def add_members(guild_id: int, team_name: str, user_ids: List[int]):
    """팀원 추가"""
    if await get_team(guild_id, team_name) is None:
        raise LeagueError(f"팀 \"{team_name}\"을(를) 찾을 수 없습니다.")
    await add_league_members(guild_id, team_name, user_ids)


async def set_captain(guild_id: int, team_name: str, user_id: int):
    """팀장 설정 (팀원이 아니면 팀원으로도 추가)"""
    if not await update_league_team(guild_id, team_name, captain_id=user_id):
        raise LeagueError(f"팀 \"{team_name}\"을(를) 찾을 수 없습니다.")
    await add_league_members(guild_id, team_name, [user_id])


async def set_voice_channel(guild_id: int, team_name: str, channel_id: int):
    """팀 음성채널 설정"""
    if not await update_league_team(guild_id, team_name, voice_channel_id=channel_id):
        raise LeagueError(f"팀 \"{team_name}\"을(를) 찾을 수 없습니다.")


# ========== 밴픽 ==========

async def start_banpick(guild_id: int, channel_id: int, team_names: List[str]) -> Dict[str, dict]:
    """
    밴픽 세션 시작
    Returns: {팀_이름: {'captain': user_id}}
    """
    if len(team_names) != BANPICK_TEAM_COUNT or len(set(team_names)) != BANPICK_TEAM_COUNT:
        raise LeagueError("밴픽을 진행할 팀 2개를 선택해주세요.")

    existing = await get_banpick_session(guild_id)
    if existing and existing['is_active']:
        raise LeagueError("이미 진행 중인 밴픽이 있습니다.")

    teams = {}
    for name in team_names:
        team = await get_team(guild_id, name)
        if team is None:
            raise LeagueError(f"팀 \"{name}\"을(를) 찾을 수 없습니다.")
        if not team['captain_id']:
            raise LeagueError(f"팀 \"{name}\"에 팀장이 설정되지 않았습니다.")
        teams[name] = {'captain': team['captain_id']}

    captains = {info['captain'] for info in teams.values()}
    if len(captains) != BANPICK_TEAM_COUNT:
        raise LeagueError("두 팀의 팀장이 같습니다. 팀장을 다르게 설정해주세요.")

    await create_banpick_session(guild_id, channel_id, teams)
    print(f"[Banpick] guild={guild_id} 세션 시작: {' vs '.join(team_names)}")
    return teams


async def get_session(guild_id: int) -> Optional[dict]:
    """밴픽 세션 조회"""
    return await get_banpick_session(guild_id)


async def set_session_message(guild_id: int, message_id: int):
    """진행 상황을 표시할 메시지 기록"""
    await update_banpick_session(guild_id, message_id=message_id)


def find_captain_team(session: dict, user_id: int) -> Optional[str]:
    """세션에서 user_id가 팀장인 팀 이름"""
    for team_name, info in session['teams'].items():
        if info.get('captain') == user_id:
            return team_name
    return None


async def submit_banpick(guild_id: int, user_id: int, banpick: str) -> Tuple[str, int]:
    """
    팀장의 밴픽 등록
    Returns: (팀_이름, 등록된 밴픽 수)
    """
    session = await get_banpick_session(guild_id)
    if session is None or not session['is_active']:
        raise LeagueError("진행 중인 밴픽이 없습니다.")

    team_name = find_captain_team(session, user_id)
    if team_name is None:
        raise LeagueError("이 밴픽의 팀장이 아닙니다.")

    if team_name in session['banpicks']:
        raise LeagueError("⚠️ 이미 밴픽을 입력하셨습니다.")

    banpick = (banpick or "").strip()
    if not banpick:
        raise LeagueError("밴픽 내용을 입력해주세요.")

    count = await add_banpick_entry(guild_id, team_name, banpick)
    print(f"[Banpick] guild={guild_id} {team_name} 밴픽 등록: {banpick} ({count}/{BANPICK_TEAM_COUNT})")
    return team_name, count


async def finish_banpick(guild_id: int) -> bool:
    """밴픽 세션 비활성화. Returns: 결과 발표를 맡을지 여부 (먼저 종료한 쪽만 True)"""
    return await deactivate_banpick_session(guild_id)


async def clear_banpick(guild_id: int):
    """밴픽 세션 정리"""
    await remove_banpick_session(guild_id)
