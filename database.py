# database.py - 데이터베이스 관리

import json
import aiosqlite
from datetime import datetime
from typing import Optional, List

import config


async def init_database():
    """데이터베이스 초기화 및 테이블 생성"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        # attendance 테이블
        await db.execute("""
            CREATE TABLE IF NOT EXISTS attendance (
                guild_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                count INTEGER DEFAULT 0,
                last_date TEXT,
                PRIMARY KEY (guild_id, user_id)
            )
        """)

        # league_teams 테이블
        await db.execute("""
            CREATE TABLE IF NOT EXISTS league_teams (
                guild_id INTEGER NOT NULL,
                team_name TEXT NOT NULL,
                score INTEGER DEFAULT 0,
                voice_channel_id INTEGER,
                captain_id INTEGER,
                created_at TIMESTAMP,
                PRIMARY KEY (guild_id, team_name)
            )
        """)

        # league_team_members 테이블
        await db.execute("""
            CREATE TABLE IF NOT EXISTS league_team_members (
                guild_id INTEGER NOT NULL,
                team_name TEXT NOT NULL,
                user_id INTEGER NOT NULL,
                PRIMARY KEY (guild_id, team_name, user_id)
            )
        """)

        # banpick_sessions 테이블 (길드당 하나)
        await db.execute("""
            CREATE TABLE IF NOT EXISTS banpick_sessions (
                guild_id INTEGER PRIMARY KEY,
                channel_id INTEGER NOT NULL,
                message_id INTEGER,
                teams TEXT NOT NULL,
                is_active INTEGER DEFAULT 1,
                created_at TIMESTAMP
            )
        """)

        # banpick_entries 테이블
        await db.execute("""
            CREATE TABLE IF NOT EXISTS banpick_entries (
                guild_id INTEGER NOT NULL,
                team_name TEXT NOT NULL,
                banpick TEXT NOT NULL,
                PRIMARY KEY (guild_id, team_name)
            )
        """)

        # music_queue 테이블
        await db.execute("""
            CREATE TABLE IF NOT EXISTS music_queue (
                guild_id INTEGER NOT NULL,
                position INTEGER NOT NULL,
                title TEXT NOT NULL,
                url TEXT NOT NULL,
                duration INTEGER DEFAULT 0,
                thumbnail TEXT,
                uploader TEXT,
                added_by INTEGER,
                added_at TIMESTAMP,
                PRIMARY KEY (guild_id, position)
            )
        """)

        # music_state 테이블
        await db.execute("""
            CREATE TABLE IF NOT EXISTS music_state (
                guild_id INTEGER PRIMARY KEY,
                current_index INTEGER DEFAULT 0,
                is_playing INTEGER DEFAULT 0
            )
        """)

        await db.commit()


# ========== 출석 ==========

async def get_attendance(guild_id: int, user_id: int) -> Optional[dict]:
    """사용자 출석 데이터 조회"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        async with db.execute(
            "SELECT * FROM attendance WHERE guild_id = ? AND user_id = ?",
            (guild_id, user_id)
        ) as cursor:
            row = await cursor.fetchone()
            if row:
                return dict(row)
            return None


async def set_attendance(guild_id: int, user_id: int, count: int, last_date: str):
    """사용자 출석 데이터 저장"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        await db.execute(
            """INSERT INTO attendance (guild_id, user_id, count, last_date)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(guild_id, user_id) DO UPDATE SET
                 count = excluded.count, last_date = excluded.last_date""",
            (guild_id, user_id, count, last_date)
        )
        await db.commit()


async def get_guild_attendance(guild_id: int) -> List[dict]:
    """서버 전체 출석 데이터 (출석 횟수 내림차순)"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        async with db.execute(
            """SELECT user_id, count, last_date
               FROM attendance
               WHERE guild_id = ?
               ORDER BY count DESC, last_date ASC""",
            (guild_id,)
        ) as cursor:
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]


# ========== 리그 ==========

async def get_league_teams(guild_id: int) -> List[dict]:
    """서버의 모든 팀 조회 (멤버 포함, 생성 순)"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        async with db.execute(
            """SELECT team_name, score, voice_channel_id, captain_id
               FROM league_teams
               WHERE guild_id = ?
               ORDER BY created_at ASC, rowid ASC""",
            (guild_id,)
        ) as cursor:
            teams = [dict(row) for row in await cursor.fetchall()]

        async with db.execute(
            "SELECT team_name, user_id FROM league_team_members WHERE guild_id = ? ORDER BY rowid ASC",
            (guild_id,)
        ) as cursor:
            members = await cursor.fetchall()

    by_team = {team['team_name']: team for team in teams}
    for team in teams:
        team['members'] = []
    for row in members:
        team = by_team.get(row['team_name'])
        if team is not None:
            team['members'].append(row['user_id'])
    return teams


async def create_league_team(guild_id: int, team_name: str) -> bool:
    """팀 생성. Returns: 성공 여부 (이미 존재하면 False)"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        cursor = await db.execute(
            """INSERT OR IGNORE INTO league_teams (guild_id, team_name, score, created_at)
               VALUES (?, ?, 0, ?)""",
            (guild_id, team_name, datetime.now().isoformat())
        )
        await db.commit()
        return cursor.rowcount > 0


async def delete_league_team(guild_id: int, team_name: str) -> bool:
    """팀 삭제 (멤버 포함)"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        cursor = await db.execute(
            "DELETE FROM league_teams WHERE guild_id = ? AND team_name = ?",
            (guild_id, team_name)
        )
        await db.execute(
            "DELETE FROM league_team_members WHERE guild_id = ? AND team_name = ?",
            (guild_id, team_name)
        )
        await db.commit()
        return cursor.rowcount > 0


async def delete_all_league_teams(guild_id: int):
    """서버의 모든 팀 삭제"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        await db.execute("DELETE FROM league_teams WHERE guild_id = ?", (guild_id,))
        await db.execute("DELETE FROM league_team_members WHERE guild_id = ?", (guild_id,))
        await db.commit()


async def add_league_score(guild_id: int, team_name: str, delta: int) -> Optional[int]:
    """팀 점수 변경. Returns: 변경 후 점수 (팀이 없으면 None)"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        await db.execute(
            "UPDATE league_teams SET score = score + ? WHERE guild_id = ? AND team_name = ?",
            (delta, guild_id, team_name)
        )
        await db.commit()
        async with db.execute(
            "SELECT score FROM league_teams WHERE guild_id = ? AND team_name = ?",
            (guild_id, team_name)
        ) as cursor:
            row = await cursor.fetchone()
            return row[0] if row else None


async def add_league_members(guild_id: int, team_name: str, user_ids: List[int]):
    """팀원 추가 (중복 무시)"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        await db.executemany(
            """INSERT OR IGNORE INTO league_team_members (guild_id, team_name, user_id)
               VALUES (?, ?, ?)""",
            [(guild_id, team_name, user_id) for user_id in user_ids]
        )
        await db.commit()


async def update_league_team(guild_id: int, team_name: str, **fields) -> bool:
    """팀 정보 업데이트 (voice_channel_id, captain_id)"""
    allowed = {k: v for k, v in fields.items() if k in ("voice_channel_id", "captain_id")}
    if not allowed:
        return False
    assignments = ", ".join(f"{key} = ?" for key in allowed)
    async with aiosqlite.connect(config.DB_PATH) as db:
        cursor = await db.execute(
            f"UPDATE league_teams SET {assignments} WHERE guild_id = ? AND team_name = ?",
            (*allowed.values(), guild_id, team_name)
        )
        await db.commit()
        return cursor.rowcount > 0


# ========== 밴픽 ==========

async def get_banpick_session(guild_id: int) -> Optional[dict]:
    """밴픽 세션 조회 (입력된 밴픽 포함)"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        async with db.execute(
            "SELECT * FROM banpick_sessions WHERE guild_id = ?",
            (guild_id,)
        ) as cursor:
            row = await cursor.fetchone()
            if row is None:
                return None
            session = dict(row)

        async with db.execute(
            "SELECT team_name, banpick FROM banpick_entries WHERE guild_id = ? ORDER BY rowid ASC",
            (guild_id,)
        ) as cursor:
            entries = await cursor.fetchall()

    session['teams'] = json.loads(session['teams'])
    session['is_active'] = bool(session['is_active'])
    session['banpicks'] = {row['team_name']: row['banpick'] for row in entries}
    return session


async def create_banpick_session(guild_id: int, channel_id: int, teams: dict, message_id: Optional[int] = None):
    """
    밴픽 세션 생성 (기존 세션은 덮어씀)
    teams: {팀_이름: {'captain': user_id}}
    """
    async with aiosqlite.connect(config.DB_PATH) as db:
        await db.execute("DELETE FROM banpick_entries WHERE guild_id = ?", (guild_id,))
        await db.execute(
            """INSERT OR REPLACE INTO banpick_sessions
               (guild_id, channel_id, message_id, teams, is_active, created_at)
               VALUES (?, ?, ?, ?, 1, ?)""",
            (guild_id, channel_id, message_id, json.dumps(teams), datetime.now().isoformat())
        )
        await db.commit()


async def update_banpick_session(guild_id: int, **fields):
    """밴픽 세션 업데이트 (message_id, is_active)"""
    allowed = {k: v for k, v in fields.items() if k in ("message_id", "is_active")}
    if not allowed:
        return
    assignments = ", ".join(f"{key} = ?" for key in allowed)
    async with aiosqlite.connect(config.DB_PATH) as db:
        await db.execute(
            f"UPDATE banpick_sessions SET {assignments} WHERE guild_id = ?",
            (*allowed.values(), guild_id)
        )
        await db.commit()


async def deactivate_banpick_session(guild_id: int) -> bool:
    """진행 중인 밴픽 세션 종료. Returns: 이번 호출로 종료했는지 여부"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        cursor = await db.execute(
            "UPDATE banpick_sessions SET is_active = 0 WHERE guild_id = ? AND is_active = 1",
            (guild_id,)
        )
        await db.commit()
        return cursor.rowcount == 1


async def add_banpick_entry(guild_id: int, team_name: str, banpick: str) -> int:
    """밴픽 등록. Returns: 현재까지 등록된 밴픽 수"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        await db.execute(
            """INSERT OR IGNORE INTO banpick_entries (guild_id, team_name, banpick)
               VALUES (?, ?, ?)""",
            (guild_id, team_name, banpick)
        )
        await db.commit()
        async with db.execute(
            "SELECT COUNT(*) FROM banpick_entries WHERE guild_id = ?",
            (guild_id,)
        ) as cursor:
            row = await cursor.fetchone()
            return row[0] if row else 0


async def remove_banpick_session(guild_id: int):
    """밴픽 세션 정리"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        await db.execute("DELETE FROM banpick_sessions WHERE guild_id = ?", (guild_id,))
        await db.execute("DELETE FROM banpick_entries WHERE guild_id = ?", (guild_id,))
        await db.commit()


# ========== 음악 재생목록 ==========

async def get_music_queue(guild_id: int) -> dict:
    """
    재생목록 조회
    Returns: {'songs': [...], 'current_index': int, 'is_playing': bool}
    """
    async with aiosqlite.connect(config.DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        async with db.execute(
            """SELECT title, url, duration, thumbnail, uploader, added_by, added_at
               FROM music_queue WHERE guild_id = ? ORDER BY position ASC""",
            (guild_id,)
        ) as cursor:
            songs = [dict(row) for row in await cursor.fetchall()]

        async with db.execute(
            "SELECT current_index, is_playing FROM music_state WHERE guild_id = ?",
            (guild_id,)
        ) as cursor:
            state = await cursor.fetchone()

    return {
        'songs': songs,
        'current_index': state['current_index'] if state else 0,
        'is_playing': bool(state['is_playing']) if state else False,
    }


async def save_music_queue(guild_id: int, songs: List[dict], current_index: int, is_playing: bool):
    """재생목록 전체 저장 (기존 목록 교체)"""
    async with aiosqlite.connect(config.DB_PATH) as db:
        await db.execute("DELETE FROM music_queue WHERE guild_id = ?", (guild_id,))
        await db.executemany(
            """INSERT INTO music_queue
               (guild_id, position, title, url, duration, thumbnail, uploader, added_by, added_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            [
                (guild_id, position, song['title'], song['url'], song.get('duration') or 0,
                 song.get('thumbnail'), song.get('uploader'), song.get('added_by'), song.get('added_at'))
                for position, song in enumerate(songs)
            ]
        )
        await db.execute(
            """INSERT INTO music_state (guild_id, current_index, is_playing)
               VALUES (?, ?, ?)
               ON CONFLICT(guild_id) DO UPDATE SET
                 current_index = excluded.current_index, is_playing = excluded.is_playing""",
            (guild_id, current_index, int(is_playing))
        )
        await db.commit()
