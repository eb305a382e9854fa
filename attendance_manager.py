# attendance_manager.py - 출석 체크 로직

from typing import List

from database import get_attendance, set_attendance, get_guild_attendance
from utils import now_kst


def get_current_date() -> str:
    """한국 시간 기준 오늘 날짜 (YYYY-MM-DD)"""
    return now_kst().strftime("%Y-%m-%d")


async def check_in(guild_id: int, user_id: int, today: str = None) -> dict:
    """
    출석 처리
    Returns: {
        'already_checked': bool,
        'count': int,
        'date': str
    }
    """
    today = today or get_current_date()
    data = await get_attendance(guild_id, user_id)
    count = data['count'] if data else 0
    last_date = data['last_date'] if data else None

    # 오늘 이미 출석했으면 그대로 반환
    if last_date == today:
        return {'already_checked': True, 'count': count, 'date': today}

    count += 1
    await set_attendance(guild_id, user_id, count, today)
    print(f"[Attendance] guild={guild_id} user={user_id} 출석 완료 ({count}일, {today})")
    return {'already_checked': False, 'count': count, 'date': today}


async def get_ranking(guild_id: int) -> List[dict]:
    """서버 출석 랭킹 (출석 횟수 내림차순)"""
    return await get_guild_attendance(guild_id)


def get_rank_badge(index: int) -> str:
    """순위별 트로피/이모티콘 (index는 0부터)"""
    if index == 0:
        return "🥇"
    if index == 1:
        return "🥈"
    if index == 2:
        return "🥉"
    if index in (3, 4):
        return "⭐"
    return f"{index + 1}."


def format_ranking_lines(ranking: List[dict], limit: int) -> str:
    """랭킹 임베드 본문"""
    lines = []
    for idx, entry in enumerate(ranking[:limit]):
        last = f" (마지막: {entry['last_date']})" if entry.get('last_date') else ""
        lines.append(f"{get_rank_badge(idx)} <@{entry['user_id']}> - **{entry['count']}일**{last}")
    return "\n".join(lines)
