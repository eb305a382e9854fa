# utils.py - 공통 유틸리티 함수

from datetime import datetime
from zoneinfo import ZoneInfo

import discord

from config import TIMEZONE

KST = ZoneInfo(TIMEZONE)


def is_admin(member: discord.Member) -> bool:
    """사용자가 관리자 권한을 가지고 있는지 확인"""
    return member.guild_permissions.administrator


def now_kst() -> datetime:
    """한국 시간 기준 현재 시각"""
    return datetime.now(KST)


def get_display_name(user) -> str:
    """닉네임 > 전역 이름 > 사용자명 순으로 표시 이름 반환"""
    return (
        getattr(user, 'nick', None)
        or getattr(user, 'global_name', None)
        or getattr(user, 'name', None)
        or '신원미상'
    )


def format_duration(seconds) -> str:
    """초 단위 시간을 m:ss 또는 h:mm:ss 형식으로 변환"""
    seconds = int(seconds or 0)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
