# team_shuffle.py - 음성채널 인원 팀 나누기

import math
import random
from typing import List, Optional, Sequence, Tuple


def split_teams(members: Sequence, rng: random.Random = None) -> Tuple[list, list]:
    """
    멤버를 무작위로 섞어 두 팀으로 나눔
    팀1이 ceil(n/2)명
    """
    rng = rng or random
    shuffled = list(members)
    rng.shuffle(shuffled)
    half = math.ceil(len(shuffled) / 2)
    return shuffled[:half], shuffled[half:]


def get_base_name(channel_name: str) -> str:
    """채널 이름의 첫 단어"""
    parts = channel_name.split()
    return parts[0] if parts else channel_name


def find_team_channels(waiting_room, voice_channels: Sequence) -> Optional[Tuple[object, object]]:
    """
    대기방 이름의 첫 단어를 포함하는 다른 음성채널 2개
    부족하면 None
    """
    base_name = get_base_name(waiting_room.name)
    candidates: List = [
        channel for channel in voice_channels
        if channel.id != waiting_room.id and base_name in channel.name
    ]
    if len(candidates) < 2:
        return None
    return candidates[0], candidates[1]


def format_team(members: Sequence, display) -> str:
    names = [display(member) for member in members]
    return ", ".join(names) if names else "없음"
