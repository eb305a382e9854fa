# commands/music_command.py - /노래 명령어 (플레이어, 재생목록 관리)

from typing import Optional

import discord
from discord import app_commands

import music_queue
from config import MUSIC_PLAYER_VIEW_TIMEOUT, MUSIC_QUEUE_PAGE_SIZE, MUSIC_REMOVE_PAGE_SIZE
from music_player import SongNotFoundError, fetch_song_info
from utils import format_duration, now_kst

MUSIC_COLOR = 0x1DB954


# ========== 임베드 ==========

def build_player_embed(queue: dict, status: str) -> discord.Embed:
    """
    음악 플레이어 임베드
    status: 'playing' | 'paused' | 'stopped'
    """
    embed = discord.Embed(title="🎵 음악 플레이어", color=MUSIC_COLOR, timestamp=now_kst())
    song = music_queue.current_song(queue)
    if song is None:
        embed.description = "재생 목록이 비어있습니다.\n`/노래 추가` 명령어로 노래를 추가해보세요!"
        return embed

    icon, label = {
        'playing': ("▶️", "현재 재생 중"),
        'paused': ("⏸️", "일시정지됨"),
    }.get(status, ("⏹️", "정지됨"))
    embed.description = f"{icon} **{label}**"
    embed.add_field(name="🎵 제목", value=f"**[{song['title']}]({song['url']})**", inline=False)
    embed.add_field(name="⏱️ 재생 시간", value=format_duration(song['duration']), inline=True)
    embed.add_field(name="👤 추가한 사람", value=f"<@{song['added_by']}>" if song.get('added_by') else "알 수 없음", inline=True)
    embed.add_field(name="📋 큐 정보", value=f"{queue['current_index'] + 1} / {len(queue['songs'])}곡", inline=True)
    if song.get('thumbnail'):
        embed.set_thumbnail(url=song['thumbnail'])
    return embed


def build_queue_embed(queue: dict, page: int) -> discord.Embed:
    """재생목록 임베드 (page는 0부터)"""
    embed = discord.Embed(title="📋 재생목록", color=MUSIC_COLOR, timestamp=now_kst())
    songs = queue['songs']
    if not songs:
        embed.description = "재생목록이 비어있습니다."
        return embed

    total_pages = music_queue.page_count(len(songs), MUSIC_QUEUE_PAGE_SIZE)
    page = max(0, min(page, total_pages - 1))
    start = page * MUSIC_QUEUE_PAGE_SIZE

    lines = []
    for index, song in enumerate(songs[start:start + MUSIC_QUEUE_PAGE_SIZE], start):
        marker = "▶️ " if index == queue['current_index'] else ""
        lines.append(f"{marker}`{index + 1}.` **{song['title']}** ({format_duration(song['duration'])})")
    embed.description = "\n".join(lines)
    embed.set_footer(text=f"페이지 {page + 1}/{total_pages} | 총 {len(songs)}곡")
    return embed


def build_added_embed(song: dict, position: int, started: bool) -> discord.Embed:
    embed = discord.Embed(
        title="✅ 노래가 추가되었습니다!",
        description=f"**{song['title']}**",
        color=discord.Color.green(),
        timestamp=now_kst()
    )
    embed.add_field(name="재생 시간", value=format_duration(song['duration']), inline=True)
    embed.add_field(name="추가한 사람", value=f"<@{song['added_by']}>", inline=True)
    embed.add_field(name="채널", value=song['uploader'], inline=True)
    if song.get('thumbnail'):
        embed.set_thumbnail(url=song['thumbnail'])
    if started:
        embed.set_footer(text="🎵 재생을 시작합니다!")
    else:
        embed.add_field(name="재생목록 위치", value=f"{position}번째", inline=True)
    return embed


def build_removed_embed(removed: list) -> discord.Embed:
    """삭제 결과 (최대 5곡 + 외 N곡)"""
    titles = [f"• {song['title']}" for song in removed[:5]]
    if len(removed) > 5:
        titles.append(f"외 {len(removed) - 5}곡")
    return discord.Embed(
        title="🗑️ 노래가 삭제되었습니다",
        description="\n".join(titles),
        color=discord.Color.red(),
        timestamp=now_kst()
    )


# ========== 공통 처리 ==========

def get_player(interaction: discord.Interaction):
    return interaction.client.music_player


def get_status(player, guild_id: int, queue: dict) -> str:
    if player.is_paused(guild_id):
        return 'paused'
    if player.is_playing(guild_id) or (queue['is_playing'] and player.is_connected(guild_id)):
        return 'playing'
    return 'stopped'


async def check_voice(interaction: discord.Interaction) -> Optional[discord.VoiceChannel]:
    """사용자 음성채널 및 봇 권한 확인 (실패 시 응답 후 None)"""
    if interaction.guild is None:
        await interaction.response.send_message("❌ 이 명령어는 서버에서만 사용할 수 있습니다.", ephemeral=True)
        return None

    voice = getattr(interaction.user, 'voice', None)
    if voice is None or voice.channel is None:
        await interaction.response.send_message("❌ 음성 채널에 먼저 참여해주세요!", ephemeral=True)
        return None

    permissions = voice.channel.permissions_for(interaction.guild.me)
    if not permissions.connect or not permissions.speak:
        await interaction.response.send_message("❌ 해당 음성 채널에 연결하거나 말할 권한이 없습니다.", ephemeral=True)
        return None
    return voice.channel


async def add_song(interaction: discord.Interaction, channel: discord.VoiceChannel, query: str) -> discord.Embed:
    """노래 검색 후 재생목록에 추가. 재생 중이 아니면 재생 시작 (응답은 defer 된 상태)"""
    guild_id = interaction.guild.id
    info = await fetch_song_info(query)
    song = music_queue.build_song(info, interaction.user.id)

    async with music_queue.get_queue_lock(guild_id):
        queue = await music_queue.load_queue(guild_id)
        position = music_queue.append_song(queue, song)
        await music_queue.store_queue(guild_id, queue)
    print(f"[Music] guild={guild_id} 노래 추가: {song['title']} ({position}번째)")

    player = get_player(interaction)
    started = False
    if not player.is_playing(guild_id) and not player.is_paused(guild_id):
        if position > 1:
            # 마지막 곡까지 재생이 끝난 상태면 새 곡부터 재생
            async with music_queue.get_queue_lock(guild_id):
                queue = await music_queue.load_queue(guild_id)
                if not queue['is_playing'] and queue['current_index'] == len(queue['songs']) - 2:
                    queue['current_index'] = len(queue['songs']) - 1
                    await music_queue.store_queue(guild_id, queue)
        started = await player.start(channel)
    return build_added_embed(song, position, started)


def describe_add_error(error: Exception) -> str:
    message = str(error)
    if isinstance(error, SongNotFoundError) and "검색 결과" in message:
        return "❌ 검색 결과를 찾을 수 없습니다. 다른 검색어를 시도해보세요."
    if "age" in message.lower():
        return "❌ 연령 제한이 있는 동영상입니다."
    return "❌ 노래를 추가하는 중 오류가 발생했습니다."


async def remove_songs(interaction: discord.Interaction, indices: list) -> list:
    """재생목록에서 노래 삭제. 재생 중인 곡이 삭제되면 다음 곡 재생"""
    guild_id = interaction.guild.id
    player = get_player(interaction)

    async with music_queue.get_queue_lock(guild_id):
        queue = await music_queue.load_queue(guild_id)
        current = music_queue.current_song(queue)
        removed = music_queue.remove_indices(queue, indices)
        await music_queue.store_queue(guild_id, queue)
        now_current = music_queue.current_song(queue)

    if current is not None and any(song is current for song in removed):
        if now_current is None:
            await player.stop(guild_id)
        elif player.is_playing(guild_id) or player.is_paused(guild_id):
            await player.play_current(guild_id)
    return removed


async def shuffle_queue(guild_id: int) -> bool:
    async with music_queue.get_queue_lock(guild_id):
        queue = await music_queue.load_queue(guild_id)
        if len(queue['songs']) < 2:
            return False
        music_queue.shuffle_upcoming(queue)
        await music_queue.store_queue(guild_id, queue)
    return True


# ========== 뷰 ==========

class AddSongModal(discord.ui.Modal, title="🎵 노래 추가"):
    query = discord.ui.TextInput(label="YouTube URL 또는 검색어", placeholder="예: 아이유 좋은날", max_length=200)

    def __init__(self, channel: discord.VoiceChannel, player_view: "MusicPlayerView" = None):
        super().__init__()
        self.channel = channel
        self.player_view = player_view

    async def on_submit(self, interaction: discord.Interaction):
        await interaction.response.defer(thinking=True)
        try:
            embed = await add_song(interaction, self.channel, self.query.value)
        except Exception as e:
            print(f"[Music] 노래 추가 오류: {e}")
            await interaction.followup.send(describe_add_error(e), ephemeral=True)
            return
        await interaction.followup.send(embed=embed)
        if self.player_view:
            await self.player_view.refresh()


class QueuePageView(discord.ui.View):
    """재생목록 페이지 이동"""

    def __init__(self, queue: dict, page: int = 0):
        super().__init__(timeout=MUSIC_PLAYER_VIEW_TIMEOUT)
        self.queue = queue
        self.page = page
        self.total_pages = music_queue.page_count(len(queue['songs']), MUSIC_QUEUE_PAGE_SIZE)
        self._update_buttons()

    def _update_buttons(self):
        self.previous_page.disabled = self.page <= 0
        self.next_page.disabled = self.page >= self.total_pages - 1

    @discord.ui.button(label="◀ 이전", style=discord.ButtonStyle.secondary)
    async def previous_page(self, interaction: discord.Interaction, button: discord.ui.Button):
        self.page = max(0, self.page - 1)
        self._update_buttons()
        await interaction.response.edit_message(embed=build_queue_embed(self.queue, self.page), view=self)

    @discord.ui.button(label="다음 ▶", style=discord.ButtonStyle.secondary)
    async def next_page(self, interaction: discord.Interaction, button: discord.ui.Button):
        self.page = min(self.total_pages - 1, self.page + 1)
        self._update_buttons()
        await interaction.response.edit_message(embed=build_queue_embed(self.queue, self.page), view=self)


class RemoveSongView(discord.ui.View):
    """삭제할 노래를 페이지별로 골라 한 번에 삭제"""

    def __init__(self, owner_id: int, queue: dict):
        super().__init__(timeout=MUSIC_PLAYER_VIEW_TIMEOUT)
        self.owner_id = owner_id
        self.songs = list(queue['songs'])
        self.page = 0
        self.selected = set()
        self.total_pages = music_queue.page_count(len(self.songs), MUSIC_REMOVE_PAGE_SIZE)
        self._build()

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.owner_id:
            await interaction.response.send_message("❌ 명령어를 실행한 사용자만 사용할 수 있습니다.", ephemeral=True)
            return False
        return True

    def build_embed(self) -> discord.Embed:
        start = self.page * MUSIC_REMOVE_PAGE_SIZE
        lines = []
        for index, song in enumerate(self.songs[start:start + MUSIC_REMOVE_PAGE_SIZE], start):
            check = "✅" if index in self.selected else "⬜"
            lines.append(f"{check} `{index + 1}.` {song['title']}")
        embed = discord.Embed(
            title="🗑️ 노래 삭제",
            description="\n".join(lines) or "재생목록이 비어있습니다.",
            color=discord.Color.red()
        )
        embed.set_footer(text=f"페이지 {self.page + 1}/{self.total_pages} | 선택 {len(self.selected)}곡")
        return embed

    def _build(self):
        self.clear_items()
        start = self.page * MUSIC_REMOVE_PAGE_SIZE
        for index in range(start, min(start + MUSIC_REMOVE_PAGE_SIZE, len(self.songs))):
            button = discord.ui.Button(
                label=str(index + 1),
                style=discord.ButtonStyle.danger if index in self.selected else discord.ButtonStyle.secondary,
                row=0
            )
            button.callback = self._make_toggle(index)
            self.add_item(button)

        previous_button = discord.ui.Button(label="◀ 이전", style=discord.ButtonStyle.secondary, row=1, disabled=self.page <= 0)
        next_button = discord.ui.Button(label="다음 ▶", style=discord.ButtonStyle.secondary, row=1, disabled=self.page >= self.total_pages - 1)
        execute_button = discord.ui.Button(label="🗑️ 삭제 실행", style=discord.ButtonStyle.danger, row=1, disabled=not self.selected)
        cancel_button = discord.ui.Button(label="❌ 취소", style=discord.ButtonStyle.secondary, row=1)
        previous_button.callback = self._previous
        next_button.callback = self._next
        execute_button.callback = self._execute
        cancel_button.callback = self._cancel
        for item in (previous_button, next_button, execute_button, cancel_button):
            self.add_item(item)

    def _make_toggle(self, index: int):
        async def toggle(interaction: discord.Interaction):
            if index in self.selected:
                self.selected.discard(index)
            else:
                self.selected.add(index)
            self._build()
            await interaction.response.edit_message(embed=self.build_embed(), view=self)
        return toggle

    async def _previous(self, interaction: discord.Interaction):
        self.page = max(0, self.page - 1)
        self._build()
        await interaction.response.edit_message(embed=self.build_embed(), view=self)

    async def _next(self, interaction: discord.Interaction):
        self.page = min(self.total_pages - 1, self.page + 1)
        self._build()
        await interaction.response.edit_message(embed=self.build_embed(), view=self)

    async def _execute(self, interaction: discord.Interaction):
        # 화면을 연 뒤 재생목록이 바뀌었을 수 있으므로 URL이 같은 곡만 삭제
        current = await music_queue.load_queue(interaction.guild.id)
        indices = [
            i for i in self.selected
            if i < len(current['songs']) and current['songs'][i]['url'] == self.songs[i]['url']
        ]
        self.stop()
        await interaction.response.defer()
        removed = await remove_songs(interaction, indices)
        if not removed:
            await interaction.edit_original_response(content="❌ 삭제할 노래를 찾을 수 없습니다.", embed=None, view=None)
            return
        await interaction.edit_original_response(embed=build_removed_embed(removed), view=None)

    async def _cancel(self, interaction: discord.Interaction):
        self.stop()
        await interaction.response.edit_message(content="삭제를 취소했습니다.", embed=None, view=None)


class MusicPlayerView(discord.ui.View):
    """음악 플레이어 컨트롤 버튼"""

    def __init__(self, player, guild_id: int, owner_id: int):
        super().__init__(timeout=MUSIC_PLAYER_VIEW_TIMEOUT)
        self.player = player
        self.guild_id = guild_id
        self.owner_id = owner_id
        self.message = None

    def apply_state(self, queue: dict, status: str):
        """재생목록 상태에 따라 버튼 활성화"""
        has_queue = bool(queue['songs'])
        has_multiple = len(queue['songs']) > 1
        playing = status == 'playing'

        self.previous_button.disabled = not has_multiple
        self.play_pause_button.disabled = not has_queue
        self.play_pause_button.label = "일시정지" if playing else "재 생"
        self.play_pause_button.emoji = "⏸️" if playing else "▶️"
        self.play_pause_button.style = discord.ButtonStyle.secondary if playing else discord.ButtonStyle.success
        self.next_button.disabled = not has_multiple
        self.queue_button.disabled = not has_queue
        self.shuffle_button.disabled = not has_multiple
        self.remove_button.disabled = not has_queue
        self.clear_button.disabled = not has_queue
        self.leave_button.disabled = not has_queue

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.owner_id:
            await interaction.response.send_message("❌ 플레이어를 연 사용자만 조작할 수 있습니다.", ephemeral=True)
            return False
        voice = getattr(interaction.user, 'voice', None)
        if voice is None or voice.channel is None:
            await interaction.response.send_message("❌ 음성 채널에 먼저 참여해주세요!", ephemeral=True)
            return False
        return True

    async def on_timeout(self):
        for item in self.children:
            item.disabled = True
        if self.message:
            try:
                await self.message.edit(view=self)
            except discord.HTTPException as e:
                print(f"[Music] 플레이어 버튼 비활성화 실패: {e}")

    async def on_error(self, interaction: discord.Interaction, error: Exception, item):
        print(f"[Music] 플레이어 버튼 처리 오류: {error}")
        if interaction.response.is_done():
            await interaction.followup.send("❌ 처리 중 오류가 발생했습니다.", ephemeral=True)
        else:
            await interaction.response.send_message("❌ 처리 중 오류가 발생했습니다.", ephemeral=True)

    async def _redraw(self, interaction: discord.Interaction):
        queue = await music_queue.load_queue(self.guild_id)
        status = get_status(self.player, self.guild_id, queue)
        self.apply_state(queue, status)
        embed = build_player_embed(queue, status)
        if interaction.response.is_done():
            await interaction.edit_original_response(embed=embed, view=self)
        else:
            await interaction.response.edit_message(embed=embed, view=self)

    async def refresh(self):
        """모달 등 다른 응답 이후 플레이어 메시지 갱신"""
        if self.message is None:
            return
        queue = await music_queue.load_queue(self.guild_id)
        status = get_status(self.player, self.guild_id, queue)
        self.apply_state(queue, status)
        await self.message.edit(embed=build_player_embed(queue, status), view=self)

    @discord.ui.button(label="이전곡", emoji="⏮️", style=discord.ButtonStyle.secondary, row=0)
    async def previous_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await interaction.response.defer()
        await self.player.jump(self.guild_id, -1)
        await self._redraw(interaction)

    @discord.ui.button(label="재 생", emoji="▶️", style=discord.ButtonStyle.success, row=0)
    async def play_pause_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await interaction.response.defer()
        player = self.player
        if player.is_playing(self.guild_id):
            await player.pause(self.guild_id)
        elif player.is_paused(self.guild_id):
            await player.resume(self.guild_id)
        else:
            await player.start(interaction.user.voice.channel)
        await self._redraw(interaction)

    @discord.ui.button(label="다음곡", emoji="⏭️", style=discord.ButtonStyle.secondary, row=0)
    async def next_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await interaction.response.defer()
        await self.player.jump(self.guild_id, 1)
        await self._redraw(interaction)

    @discord.ui.button(label="노래 추가", emoji="➕", style=discord.ButtonStyle.primary, row=1)
    async def add_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await interaction.response.send_modal(AddSongModal(interaction.user.voice.channel, self))

    @discord.ui.button(label="재생목록", emoji="📋", style=discord.ButtonStyle.secondary, row=1)
    async def queue_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        queue = await music_queue.load_queue(self.guild_id)
        await interaction.response.send_message(embed=build_queue_embed(queue, 0), view=QueuePageView(queue), ephemeral=True)

    @discord.ui.button(label="셔플", emoji="🔀", style=discord.ButtonStyle.secondary, row=1)
    async def shuffle_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await shuffle_queue(self.guild_id)
        await self._redraw(interaction)

    @discord.ui.button(label="노래 삭제", emoji="🗑️", style=discord.ButtonStyle.danger, row=2)
    async def remove_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        queue = await music_queue.load_queue(self.guild_id)
        if not queue['songs']:
            await interaction.response.send_message("❌ 재생목록이 비어있습니다.", ephemeral=True)
            return
        view = RemoveSongView(interaction.user.id, queue)
        await interaction.response.send_message(embed=view.build_embed(), view=view, ephemeral=True)

    @discord.ui.button(label="전체 삭제", emoji="🧹", style=discord.ButtonStyle.danger, row=2)
    async def clear_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self.player.stop(self.guild_id)
        await self._redraw(interaction)

    @discord.ui.button(label="나가기", emoji="👋", style=discord.ButtonStyle.danger, row=2)
    async def leave_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self.player.leave(self.guild_id)
        await self._redraw(interaction)


# ========== 명령어 ==========

def music_command(bot):

    music_group = app_commands.Group(name="노래", description="음악 재생 명령어", guild_only=True)

    @music_group.command(name="플레이어", description="음악 플레이어를 표시합니다")
    async def music_player_command(interaction: discord.Interaction):
        if await check_voice(interaction) is None:
            return
        queue = await music_queue.load_queue(interaction.guild.id)
        status = get_status(get_player(interaction), interaction.guild.id, queue)
        view = MusicPlayerView(get_player(interaction), interaction.guild.id, interaction.user.id)
        view.apply_state(queue, status)
        await interaction.response.send_message(embed=build_player_embed(queue, status), view=view)
        view.message = await interaction.original_response()

    @music_group.command(name="추가", description="재생목록에 노래를 추가합니다")
    @app_commands.rename(query="노래")
    @app_commands.describe(query="YouTube URL 또는 검색어")
    async def music_add(interaction: discord.Interaction, query: str):
        channel = await check_voice(interaction)
        if channel is None:
            return
        await interaction.response.defer()
        try:
            embed = await add_song(interaction, channel, query)
        except Exception as e:
            print(f"[Music] guild={interaction.guild.id} 노래 추가 오류: {e}")
            await interaction.followup.send(describe_add_error(e))
            return
        await interaction.followup.send(embed=embed)

    @music_group.command(name="재생", description="재생목록을 재생하거나 일시정지를 해제합니다")
    async def music_play(interaction: discord.Interaction):
        channel = await check_voice(interaction)
        if channel is None:
            return
        player = get_player(interaction)
        guild_id = interaction.guild.id
        queue = await music_queue.load_queue(guild_id)
        if not queue['songs']:
            await interaction.response.send_message(
                "❌ 재생할 노래가 없습니다. `/노래 추가` 명령어로 노래를 먼저 추가해주세요.", ephemeral=True
            )
            return
        if player.is_playing(guild_id):
            await interaction.response.send_message("🎵 이미 음악이 재생 중입니다.", ephemeral=True)
            return

        await interaction.response.defer()
        if player.is_paused(guild_id):
            await player.resume(guild_id)
            await interaction.followup.send("▶️ 재생을 재개했습니다.")
            return
        if not await player.start(channel):
            await interaction.followup.send("❌ 재생 중 오류가 발생했습니다.")
            return
        queue = await music_queue.load_queue(guild_id)
        await interaction.followup.send(embed=build_player_embed(queue, 'playing'))

    @music_group.command(name="일시정지", description="재생 중인 노래를 일시정지합니다")
    async def music_pause(interaction: discord.Interaction):
        if await check_voice(interaction) is None:
            return
        player = get_player(interaction)
        guild_id = interaction.guild.id
        if player.is_paused(guild_id):
            await interaction.response.send_message("❌ 이미 일시정지 상태입니다.", ephemeral=True)
            return
        if not await player.pause(guild_id):
            await interaction.response.send_message("❌ 현재 재생 중인 음악이 없습니다.", ephemeral=True)
            return
        await interaction.response.send_message("⏸️ 재생을 일시정지했습니다.")

    @music_group.command(name="정지", description="재생을 정지하고 재생목록을 비웁니다")
    async def music_stop(interaction: discord.Interaction):
        if await check_voice(interaction) is None:
            return
        guild_id = interaction.guild.id
        queue = await music_queue.load_queue(guild_id)
        if not queue['songs']:
            await interaction.response.send_message("❌ 재생 중인 노래가 없습니다.", ephemeral=True)
            return
        await get_player(interaction).stop(guild_id)
        await interaction.response.send_message("⏹️ 재생을 정지하고 재생목록을 초기화했습니다.")

    @music_group.command(name="스킵", description="다음 곡으로 넘어갑니다")
    async def music_skip(interaction: discord.Interaction):
        if await check_voice(interaction) is None:
            return
        guild_id = interaction.guild.id
        queue = await music_queue.load_queue(guild_id)
        if not queue['songs']:
            await interaction.response.send_message("❌ 재생목록이 비어있습니다.", ephemeral=True)
            return
        if len(queue['songs']) < 2:
            await interaction.response.send_message("❌ 스킵할 다음 곡이 없습니다.", ephemeral=True)
            return
        await interaction.response.defer()
        song = await get_player(interaction).jump(guild_id, 1)
        embed = discord.Embed(title="⏭️ 곡 스킵", description=f"**{song['title']}**", color=MUSIC_COLOR)
        await interaction.followup.send(embed=embed)

    @music_group.command(name="목록", description="재생목록을 표시합니다")
    async def music_list(interaction: discord.Interaction):
        if await check_voice(interaction) is None:
            return
        queue = await music_queue.load_queue(interaction.guild.id)
        view = QueuePageView(queue) if len(queue['songs']) > MUSIC_QUEUE_PAGE_SIZE else discord.utils.MISSING
        await interaction.response.send_message(embed=build_queue_embed(queue, 0), view=view, ephemeral=True)

    @music_group.command(name="삭제", description="재생목록에서 노래를 삭제합니다")
    @app_commands.rename(number="번호")
    @app_commands.describe(number="삭제할 노래 번호 (비워두면 선택 화면)")
    async def music_remove(interaction: discord.Interaction, number: Optional[int] = None):
        if await check_voice(interaction) is None:
            return
        guild_id = interaction.guild.id
        queue = await music_queue.load_queue(guild_id)
        if not queue['songs']:
            await interaction.response.send_message("❌ 재생목록이 비어있습니다.", ephemeral=True)
            return

        if number is None:
            view = RemoveSongView(interaction.user.id, queue)
            await interaction.response.send_message(embed=view.build_embed(), view=view, ephemeral=True)
            return

        if number < 1 or number > len(queue['songs']):
            await interaction.response.send_message("❌ 잘못된 노래 번호입니다.", ephemeral=True)
            return
        await interaction.response.defer()
        removed = await remove_songs(interaction, [number - 1])
        await interaction.followup.send(embed=build_removed_embed(removed))

    @music_group.command(name="다음곡", description="다음 곡으로 이동합니다")
    async def music_next(interaction: discord.Interaction):
        if await check_voice(interaction) is None:
            return
        queue = await music_queue.load_queue(interaction.guild.id)
        if not queue['songs']:
            await interaction.response.send_message("❌ 재생목록이 비어있습니다.", ephemeral=True)
            return
        await interaction.response.defer()
        song = await get_player(interaction).jump(interaction.guild.id, 1)
        embed = discord.Embed(title="⏭️ 다음 곡으로 이동", description=f"**{song['title']}**", color=MUSIC_COLOR)
        await interaction.followup.send(embed=embed)

    @music_group.command(name="이전곡", description="이전 곡으로 이동합니다")
    async def music_previous(interaction: discord.Interaction):
        if await check_voice(interaction) is None:
            return
        queue = await music_queue.load_queue(interaction.guild.id)
        if not queue['songs']:
            await interaction.response.send_message("❌ 재생목록이 비어있습니다.", ephemeral=True)
            return
        await interaction.response.defer()
        song = await get_player(interaction).jump(interaction.guild.id, -1)
        embed = discord.Embed(title="⏮️ 이전 곡으로 이동", description=f"**{song['title']}**", color=MUSIC_COLOR)
        await interaction.followup.send(embed=embed)

    @music_group.command(name="나가기", description="음성 채널에서 나갑니다")
    async def music_leave(interaction: discord.Interaction):
        if await check_voice(interaction) is None:
            return
        player = get_player(interaction)
        if not player.is_connected(interaction.guild.id):
            await interaction.response.send_message("❌ 음성 채널에 연결되어 있지 않습니다.", ephemeral=True)
            return
        await player.leave(interaction.guild.id)
        embed = discord.Embed(
            title="👋 음성 채널에서 나갔습니다",
            description="재생목록은 유지됩니다.",
            color=MUSIC_COLOR
        )
        await interaction.response.send_message(embed=embed)

    @music_group.command(name="셔플", description="현재 곡을 제외한 재생목록을 섞습니다")
    async def music_shuffle(interaction: discord.Interaction):
        if await check_voice(interaction) is None:
            return
        if not await shuffle_queue(interaction.guild.id):
            await interaction.response.send_message("❌ 섞을 노래가 부족합니다. (2곡 이상 필요)", ephemeral=True)
            return
        await interaction.response.send_message("🔀 재생목록을 섞었습니다.")

    bot.tree.add_command(music_group)
