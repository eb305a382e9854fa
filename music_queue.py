# music_queue.py - 음악 재생목록 관리

import asyncio
import random
from datetime import datetime
from typing import Dict, List, Optional

from database import get_music_queue, save_music_queue

_queue_locks: Dict[int, asyncio.Lock] = {}


def get_queue_lock(guild_id: int) -> asyncio.Lock:
    """길드별 재생목록 락"""
    lock = _queue_locks.get(guild_id)
    if lock is None:
        lock = asyncio.Lock()
        _queue_locks[guild_id] = lock
    return lock


def empty_queue() -> dict:
    return {'songs': [], 'current_index': 0, 'is_playing': False}


def sanitize_queue(queue: dict) -> dict:
    """URL이 없는 노래 제거 후 current_index 보정"""
    songs = [song for song in queue.get('songs', []) if song.get('url')]
    dropped = len(queue.get('songs', [])) - len(songs)
    if dropped:
        print(f"[MusicQueue] URL이 없는 노래 {dropped}개를 제거했습니다.")
    index = queue.get('current_index', 0)
    if index >= len(songs):
        index = max(0, len(songs) - 1)
    if index < 0:
        index = 0
    return {'songs': songs, 'current_index': index, 'is_playing': bool(queue.get('is_playing'))}


async def load_queue(guild_id: int) -> dict:
    """저장된 재생목록 로드"""
    try:
        return await get_music_queue(guild_id)
    except Exception as e:
        print(f"[MusicQueue] guild={guild_id} 재생목록 로드 실패: {e}")
        return empty_queue()


async def store_queue(guild_id: int, queue: dict) -> dict:
    """재생목록 저장 (정리 후 저장된 값 반환)"""
    queue = sanitize_queue(queue)
    await save_music_queue(guild_id, queue['songs'], queue['current_index'], queue['is_playing'])
    return queue


def current_song(queue: dict) -> Optional[dict]:
    songs = queue['songs']
    if not songs:
        return None
    return songs[queue['current_index']]


# ========== 순수 재생목록 연산 ==========

def append_song(queue: dict, song: dict) -> int:
    """노래 추가. Returns: 재생목록에서의 위치 (1부터)"""
    if not song.get('url'):
        raise ValueError("노래 URL이 없습니다.")
    queue['songs'].append(song)
    return len(queue['songs'])


def remove_index(queue: dict, index: int) -> dict:
    """index 위치의 노래 제거 후 current_index 보정. Returns: 제거된 노래"""
    songs = queue['songs']
    if index < 0 or index >= len(songs):
        raise IndexError("잘못된 노래 번호입니다.")
    removed = songs.pop(index)
    if index < queue['current_index']:
        queue['current_index'] -= 1
    elif index == queue['current_index'] and queue['current_index'] >= len(songs):
        queue['current_index'] = max(0, len(songs) - 1)
    return removed


def remove_indices(queue: dict, indices: List[int]) -> List[dict]:
    """여러 노래 제거 (뒤에서부터 제거해 인덱스가 밀리지 않도록)"""
    valid = sorted({i for i in indices if 0 <= i < len(queue['songs'])}, reverse=True)
    removed = [remove_index(queue, i) for i in valid]
    removed.reverse()
    return removed


def move_next(queue: dict) -> Optional[dict]:
    """다음 곡 (마지막 곡이면 처음으로)"""
    if not queue['songs']:
        return None
    queue['current_index'] = (queue['current_index'] + 1) % len(queue['songs'])
    return current_song(queue)


def move_previous(queue: dict) -> Optional[dict]:
    """이전 곡 (첫 곡이면 마지막으로)"""
    if not queue['songs']:
        return None
    if queue['current_index'] > 0:
        queue['current_index'] -= 1
    else:
        queue['current_index'] = len(queue['songs']) - 1
    return current_song(queue)


def advance_after_finish(queue: dict) -> Optional[dict]:
    """
    재생이 끝난 뒤 다음 곡으로 이동
    마지막 곡이었으면 None (반복 재생 안 함)
    """
    if not queue['songs']:
        return None
    if queue['current_index'] + 1 >= len(queue['songs']):
        return None
    queue['current_index'] += 1
    return current_song(queue)


def shuffle_upcoming(queue: dict, rng: random.Random = None):
    """현재 곡을 제외한 나머지 곡 순서 섞기"""
    rng = rng or random
    songs = queue['songs']
    if len(songs) < 2:
        return
    current = songs.pop(queue['current_index'])
    rng.shuffle(songs)
    songs.insert(0, current)
    queue['current_index'] = 0


def clear(queue: dict):
    queue['songs'] = []
    queue['current_index'] = 0
    queue['is_playing'] = False


def build_song(info: dict, added_by: int) -> dict:
    """추출된 정보로 재생목록 항목 생성"""
    return {
        'title': info.get('title') or '제목 없음',
        'url': info.get('url'),
        'duration': int(info.get('duration') or 0),
        'thumbnail': info.get('thumbnail') or '',
        'uploader': info.get('uploader') or '알 수 없음',
        'added_by': added_by,
        'added_at': datetime.now().isoformat(),
    }


def page_count(total: int, page_size: int) -> int:
    return max(1, (total + page_size - 1) // page_size)
