# commands/team_shuffle_command.py - /팀섞 명령어

import discord

from config import TEAM_SHUFFLE_VIEW_TIMEOUT
from logger import send_command_log
from team_shuffle import split_teams, find_team_channels, format_team
from utils import is_admin, get_display_name, now_kst

SHUFFLE_COLOR = 0x426cf5


def build_shuffle_embed(waiting_room, team1_channel, team2_channel, team1: list, team2: list) -> discord.Embed:
    embed = discord.Embed(
        title=f"팀 섞기 결과(대기방: {waiting_room.name})",
        color=SHUFFLE_COLOR,
        timestamp=now_kst()
    )
    embed.add_field(name=f"팀1({team1_channel.name})", value=format_team(team1, get_display_name), inline=False)
    embed.add_field(name=f"팀2({team2_channel.name})", value=format_team(team2, get_display_name), inline=False)
    return embed


class TeamShuffleView(discord.ui.View):
    """팀 섞기 결과 버튼 (다시섞기, 팀 이동, 대기방 이동)"""

    def __init__(self, waiting_room: discord.VoiceChannel, team1_channel, team2_channel, team1: list, team2: list):
        super().__init__(timeout=TEAM_SHUFFLE_VIEW_TIMEOUT)
        self.waiting_room = waiting_room
        self.team1_channel = team1_channel
        self.team2_channel = team2_channel
        self.team1 = team1
        self.team2 = team2
        self.message = None

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        voice = getattr(interaction.user, 'voice', None)
        if voice is None or voice.channel is None:
            await interaction.response.send_message("먼저 음성채널에 들어가주세요.", ephemeral=True)
            return False
        if not is_admin(interaction.user):
            await interaction.response.send_message("관리자 권한이 없습니다.", ephemeral=True)
            return False
        return True

    async def on_timeout(self):
        for item in self.children:
            item.disabled = True
        if self.message:
            try:
                await self.message.edit(view=self)
            except discord.HTTPException as e:
                print(f"[TeamShuffle] 버튼 비활성화 실패: {e}")

    async def _move(self, members: list, channel) -> int:
        """members를 channel로 이동. Returns: 이동 실패 인원"""
        failed = 0
        for member in members:
            if member.voice is None or member.voice.channel is None:
                continue
            try:
                await member.move_to(channel)
            except discord.HTTPException as e:
                print(f"[TeamShuffle] {member} 이동 실패: {e}")
                failed += 1
        return failed

    async def _move_and_report(self, interaction: discord.Interaction, members: list, channel, done_text: str):
        target = interaction.guild.get_channel(channel.id)
        if target is None:
            await interaction.response.send_message("이동할 음성 채널이 없습니다.", ephemeral=True)
            return
        await interaction.response.defer()
        failed = await self._move(members, target)
        text = done_text if not failed else f"{done_text} (실패 {failed}명)"
        await interaction.followup.send(text)

    @discord.ui.button(label="다시섞기", style=discord.ButtonStyle.primary)
    async def reshuffle_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        members = [m for m in self.waiting_room.members if not m.bot]
        self.team1, self.team2 = split_teams(members)
        embed = build_shuffle_embed(self.waiting_room, self.team1_channel, self.team2_channel, self.team1, self.team2)
        await interaction.response.edit_message(content="팀을 다시 섞었습니다.", embed=embed, view=self)

    @discord.ui.button(label="팀1 이동", style=discord.ButtonStyle.success)
    async def move_team1_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._move_and_report(interaction, self.team1, self.team1_channel, "팀1이 이동되었습니다.")

    @discord.ui.button(label="팀2 이동", style=discord.ButtonStyle.success)
    async def move_team2_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._move_and_report(interaction, self.team2, self.team2_channel, "팀2가 이동되었습니다.")

    @discord.ui.button(label="대기방 이동", style=discord.ButtonStyle.danger)
    async def move_waiting_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._move_and_report(
            interaction, self.team1 + self.team2, self.waiting_room,
            "모든 사용자가 대기방으로 이동되었습니다."
        )


def team_shuffle_command(bot):

    @bot.tree.command(name="팀섞", description="음성채널 인원을 두 팀으로 섞습니다")
    @discord.app_commands.guild_only()
    async def slash_team_shuffle(interaction: discord.Interaction):
        user = interaction.user
        name = get_display_name(user)

        if not is_admin(user):
            await interaction.response.send_message(f"{name}님, 관리자 권한이 없습니다.", ephemeral=True)
            return

        voice = getattr(user, 'voice', None)
        if voice is None or voice.channel is None:
            await interaction.response.send_message(f"{name}님, 먼저 음성채널에 들어가주세요.", ephemeral=True)
            return

        waiting_room = voice.channel
        channels = find_team_channels(waiting_room, interaction.guild.voice_channels)
        if channels is None:
            await interaction.response.send_message("팀을 섞을 수 있는 채널이 충분하지 않습니다.", ephemeral=True)
            return

        team1_channel, team2_channel = channels
        members = [m for m in waiting_room.members if not m.bot]
        team1, team2 = split_teams(members)

        view = TeamShuffleView(waiting_room, team1_channel, team2_channel, team1, team2)
        embed = build_shuffle_embed(waiting_room, team1_channel, team2_channel, team1, team2)
        await interaction.response.send_message(embed=embed, view=view)
        view.message = await interaction.original_response()
        await send_command_log(
            interaction.client, user, "/팀섞", interaction.guild,
            f"대기방: {waiting_room.name}\n인원: {len(members)}명"
        )
