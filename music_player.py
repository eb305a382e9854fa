# music_player.py - 음성채널 연결, 재생, 자동 퇴장 관리

import asyncio
import re
from typing import Dict, Optional, Set

import discord
import yt_dlp

from config import (
    YTDL_SEARCH_OPTIONS, YTDL_STREAM_OPTIONS, FFMPEG_OPTIONS,
    MUSIC_AUTO_LEAVE_TIMEOUT, MUSIC_STREAM_RETRY, MUSIC_RETRY_DELAY,
)
import music_queue

YOUTUBE_ID_PATTERN = re.compile(r'(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)')


class SongNotFoundError(Exception):
    """검색 결과가 없거나 정보를 가져올 수 없음"""


def extract_youtube_id(url: str) -> Optional[str]:
    """YouTube URL에서 동영상 ID 추출"""
    match = YOUTUBE_ID_PATTERN.search(url or "")
    return match.group(1) if match else None


def is_url(query: str) -> bool:
    return query.startswith("http://") or query.startswith("https://")


def normalize_entry(entry: dict) -> dict:
    """yt-dlp 결과를 재생목록용 정보로 변환"""
    url = entry.get('webpage_url') or entry.get('url') or ''
    if url and not is_url(url) and entry.get('id'):
        url = f"https://www.youtube.com/watch?v={entry['id']}"

    thumbnail = entry.get('thumbnail') or ''
    if not thumbnail and entry.get('thumbnails'):
        thumbnail = entry['thumbnails'][-1].get('url', '')

    return {
        'title': entry.get('title') or '제목 없음',
        'url': url,
        'duration': int(entry.get('duration') or 0),
        'thumbnail': thumbnail,
        'uploader': entry.get('uploader') or entry.get('channel') or '알 수 없음',
    }


def _extract_info(query: str, options: dict) -> Optional[dict]:
    with yt_dlp.YoutubeDL(options) as ydl:
        return ydl.extract_info(query, download=False)


async def fetch_song_info(query: str) -> dict:
    """
    URL 또는 검색어로 노래 정보 조회
    플레이리스트는 첫 번째 곡만 사용
    """
    query = query.strip()
    search = query if is_url(query) else f"ytsearch1:{query}"
    loop = asyncio.get_running_loop()

    try:
        data = await loop.run_in_executor(None, _extract_info, search, YTDL_SEARCH_OPTIONS)
        if data and 'entries' in data:
            entries = [e for e in data['entries'] if e]
            if not entries:
                raise SongNotFoundError("검색 결과를 찾을 수 없습니다.")
            data = entries[0]
        if not data:
            raise SongNotFoundError("동영상 정보를 가져올 수 없습니다.")
        info = normalize_entry(data)
        if not info['url']:
            raise SongNotFoundError("동영상 정보를 가져올 수 없습니다.")
        print(f"[MusicPlayer] 검색 결과: {info['title']}")
        return info
    except (yt_dlp.utils.DownloadError, SongNotFoundError) as e:
        print(f"[MusicPlayer] 노래 정보 가져오기 실패 ({query}): {e}")
        # 마지막 시도: YouTube ID로 기본 정보 구성
        video_id = extract_youtube_id(query)
        if video_id:
            return {
                'title': f"검색어: {query}",
                'url': f"https://www.youtube.com/watch?v={video_id}",
                'duration': 0,
                'thumbnail': f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg",
                'uploader': '알 수 없음',
            }
        if isinstance(e, SongNotFoundError):
            raise
        raise SongNotFoundError(f"노래 정보를 가져오는데 실패했습니다: {e}")


async def fetch_stream_url(url: str) -> str:
    """재생 가능한 오디오 스트림 주소"""
    loop = asyncio.get_running_loop()
    data = await loop.run_in_executor(None, _extract_info, url, YTDL_STREAM_OPTIONS)
    if not data or not data.get('url'):
        raise SongNotFoundError("스트림 주소를 가져올 수 없습니다.")
    return data['url']


class MusicPlayer:
    def __init__(self, bot):
        self.bot = bot
        self.leave_timers: Dict[int, asyncio.Task] = {}  # {guild_id: task}
        self._manual_stops: Set[int] = set()  # 직접 정지한 길드 (다음 곡 자동 재생 안 함)

    # ========== 음성 연결 ==========

    def get_voice_client(self, guild_id: int) -> Optional[discord.VoiceClient]:
        guild = self.bot.get_guild(guild_id)
        return guild.voice_client if guild else None

    def is_connected(self, guild_id: int) -> bool:
        voice_client = self.get_voice_client(guild_id)
        return voice_client is not None and voice_client.is_connected()

    async def connect(self, channel: discord.VoiceChannel) -> discord.VoiceClient:
        """음성채널 연결 (이미 다른 채널이면 이동)"""
        voice_client = channel.guild.voice_client
        if voice_client and voice_client.is_connected():
            if voice_client.channel.id != channel.id:
                await voice_client.move_to(channel)
            return voice_client

        voice_client = await channel.connect()
        print(f"[MusicPlayer] {channel.guild.name} 음성채널 연결: {channel.name}")
        self.check_members(channel.guild.id)
        return voice_client

    # ========== 재생 ==========

    def _halt(self, guild_id: int):
        """after 콜백에서 다음 곡으로 넘어가지 않도록 재생 중지"""
        voice_client = self.get_voice_client(guild_id)
        if voice_client and (voice_client.is_playing() or voice_client.is_paused()):
            self._manual_stops.add(guild_id)
            voice_client.stop()

    async def play_current(self, guild_id: int, retry_count: int = 0) -> bool:
        """현재 곡 재생. Returns: 재생 성공 여부"""
        voice_client = self.get_voice_client(guild_id)
        if voice_client is None or not voice_client.is_connected():
            print(f"[MusicPlayer] guild={guild_id} 음성채널에 연결되어 있지 않음")
            return False

        async with music_queue.get_queue_lock(guild_id):
            queue = await music_queue.load_queue(guild_id)
            song = music_queue.current_song(queue)
        if song is None:
            return False

        try:
            stream_url = await fetch_stream_url(song['url'])
        except Exception as e:
            print(f"[MusicPlayer] guild={guild_id} 스트림 생성 실패 ({song['title']}): {e}")
            if retry_count < MUSIC_STREAM_RETRY:
                await asyncio.sleep(MUSIC_RETRY_DELAY)
                return await self.play_current(guild_id, retry_count + 1)
            print(f"[MusicPlayer] guild={guild_id} 최대 재시도 횟수 초과, 다음 곡으로 이동")
            await self._advance(guild_id)
            return False

        self._halt(guild_id)
        source = discord.FFmpegPCMAudio(stream_url, **FFMPEG_OPTIONS)
        loop = self.bot.loop

        def after_play(error):
            if error:
                print(f"[MusicPlayer] guild={guild_id} 플레이어 오류: {error}")
            asyncio.run_coroutine_threadsafe(self._on_song_end(guild_id), loop)

        voice_client.play(source, after=after_play)
        await self.set_playing(guild_id, True)
        print(f"[MusicPlayer] guild={guild_id} 재생 시작: {song['title']}")
        return True

    async def _on_song_end(self, guild_id: int):
        if guild_id in self._manual_stops:
            self._manual_stops.discard(guild_id)
            return
        # 연결이 끊겨 멈춘 경우 현재 곡 유지
        if not self.is_connected(guild_id):
            return
        await self._advance(guild_id)

    async def _advance(self, guild_id: int):
        """다음 곡으로 이동, 마지막 곡이었으면 정지"""
        async with music_queue.get_queue_lock(guild_id):
            queue = await music_queue.load_queue(guild_id)
            next_song = music_queue.advance_after_finish(queue)
            if next_song is None:
                queue['is_playing'] = False
                await music_queue.store_queue(guild_id, queue)
                print(f"[MusicPlayer] guild={guild_id} 재생목록 완료")
                return
            await music_queue.store_queue(guild_id, queue)
        await self.play_current(guild_id)

    async def set_playing(self, guild_id: int, is_playing: bool):
        async with music_queue.get_queue_lock(guild_id):
            queue = await music_queue.load_queue(guild_id)
            queue['is_playing'] = is_playing
            await music_queue.store_queue(guild_id, queue)

    def is_paused(self, guild_id: int) -> bool:
        voice_client = self.get_voice_client(guild_id)
        return voice_client is not None and voice_client.is_paused()

    def is_playing(self, guild_id: int) -> bool:
        voice_client = self.get_voice_client(guild_id)
        return voice_client is not None and voice_client.is_playing()

    async def pause(self, guild_id: int) -> bool:
        voice_client = self.get_voice_client(guild_id)
        if voice_client is None or not voice_client.is_playing():
            return False
        voice_client.pause()
        await self.set_playing(guild_id, False)
        return True

    async def resume(self, guild_id: int) -> bool:
        voice_client = self.get_voice_client(guild_id)
        if voice_client is None or not voice_client.is_paused():
            return False
        voice_client.resume()
        await self.set_playing(guild_id, True)
        return True

    async def start(self, channel: discord.VoiceChannel) -> bool:
        """음성채널 연결 후 재생 중이 아니면 현재 곡부터 재생"""
        await self.connect(channel)
        guild_id = channel.guild.id
        if self.is_playing(guild_id):
            return True
        if self.is_paused(guild_id):
            return await self.resume(guild_id)
        return await self.play_current(guild_id)

    async def jump(self, guild_id: int, step: int) -> Optional[dict]:
        """
        다음(step=1)/이전(step=-1) 곡으로 이동 후 재생 (끝에서 순환)
        Returns: 이동한 곡
        """
        async with music_queue.get_queue_lock(guild_id):
            queue = await music_queue.load_queue(guild_id)
            if step > 0:
                song = music_queue.move_next(queue)
            else:
                song = music_queue.move_previous(queue)
            if song is None:
                return None
            await music_queue.store_queue(guild_id, queue)

        if self.is_connected(guild_id):
            await self.play_current(guild_id)
        return song

    async def stop(self, guild_id: int):
        """재생 정지 및 재생목록 초기화"""
        self._halt(guild_id)
        async with music_queue.get_queue_lock(guild_id):
            queue = await music_queue.load_queue(guild_id)
            music_queue.clear(queue)
            await music_queue.store_queue(guild_id, queue)

    async def leave(self, guild_id: int):
        """음성채널 퇴장 (재생목록은 유지)"""
        self.cancel_leave_timer(guild_id)
        self._halt(guild_id)
        voice_client = self.get_voice_client(guild_id)
        if voice_client:
            await voice_client.disconnect()
        await self.set_playing(guild_id, False)

    # ========== 자동 퇴장 ==========

    def check_members(self, guild_id: int):
        """봇이 있는 음성채널의 사람 수에 따라 자동 퇴장 타이머 관리"""
        voice_client = self.get_voice_client(guild_id)
        if voice_client is None or voice_client.channel is None:
            return

        humans = [m for m in voice_client.channel.members if not m.bot]
        if not humans:
            self.start_leave_timer(guild_id)
        else:
            self.cancel_leave_timer(guild_id)

    def start_leave_timer(self, guild_id: int):
        self.cancel_leave_timer(guild_id)
        print(f"[MusicPlayer] guild={guild_id} 자동 퇴장 타이머 시작 ({MUSIC_AUTO_LEAVE_TIMEOUT}초)")
        self.leave_timers[guild_id] = asyncio.create_task(self._leave_after_timeout(guild_id))

    def cancel_leave_timer(self, guild_id: int):
        task = self.leave_timers.pop(guild_id, None)
        if task and not task.done() and task is not asyncio.current_task():
            task.cancel()
            print(f"[MusicPlayer] guild={guild_id} 자동 퇴장 타이머 취소")

    async def _leave_after_timeout(self, guild_id: int):
        try:
            await asyncio.sleep(MUSIC_AUTO_LEAVE_TIMEOUT)
        except asyncio.CancelledError:
            return

        # 타이머 만료 시점에 다시 확인
        voice_client = self.get_voice_client(guild_id)
        if voice_client and voice_client.channel:
            if any(not m.bot for m in voice_client.channel.members):
                self.leave_timers.pop(guild_id, None)
                return

        print(f"[MusicPlayer] guild={guild_id} 자동 퇴장 - 혼자 있어서 음성채널에서 나감")
        self.leave_timers.pop(guild_id, None)
        try:
            await self.leave(guild_id)
        except Exception as e:
            print(f"[MusicPlayer] guild={guild_id} 자동 퇴장 오류: {e}")

    async def on_voice_state_update(self, member: discord.Member, before: discord.VoiceState, after: discord.VoiceState):
        """음성채널 상태 변경 감지"""
        guild_id = member.guild.id

        # 봇 자신의 연결이 끊긴 경우
        if self.bot.user and member.id == self.bot.user.id:
            if before.channel is not None and after.channel is None:
                print(f"[MusicPlayer] guild={guild_id} 봇이 음성채널에서 연결 해제됨")
                self.cancel_leave_timer(guild_id)
                self._manual_stops.discard(guild_id)
                await self.set_playing(guild_id, False)
            return

        if member.bot:
            return

        voice_client = self.get_voice_client(guild_id)
        if voice_client is None or voice_client.channel is None:
            return

        bot_channel_id = voice_client.channel.id
        before_id = before.channel.id if before.channel else None
        after_id = after.channel.id if after.channel else None
        if bot_channel_id in (before_id, after_id):
            # 상태 반영 대기
            await asyncio.sleep(1)
            self.check_members(guild_id)


def setup_music_player(bot) -> MusicPlayer:
    """음악 플레이어 생성 및 음성 이벤트 연결"""
    player = MusicPlayer(bot)
    bot.music_player = player

    @bot.listen("on_voice_state_update")
    async def music_voice_state_update(member, before, after):
        await player.on_voice_state_update(member, before, after)

    return player
