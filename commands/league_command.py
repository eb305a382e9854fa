# commands/league_command.py - /리그 명령어 (팀/점수/이동/밴픽 관리 패널)

import asyncio

import discord

from config import LEAGUE_VIEW_TIMEOUT, BANPICK_COUNTDOWN
from league_manager import (
    LeagueError, MAX_SELECT_OPTIONS, BANPICK_TEAM_COUNT,
    parse_score, get_teams, get_team, create_team, delete_team, reset_teams,
    change_score, add_members, set_captain, set_voice_channel,
    start_banpick, get_session, set_session_message, find_captain_team,
    submit_banpick, finish_banpick, clear_banpick,
)
from logger import send_command_log
from utils import now_kst

LEAGUE_COLOR = 0x426cf5


def _error_embed(message: str, title: str = "⚠️ 오류") -> discord.Embed:
    return discord.Embed(title=title, description=message, color=discord.Color.red())


def build_main_embed(guild_name: str) -> discord.Embed:
    embed = discord.Embed(
        title="🏆 리그 관리 시스템",
        description=f"{guild_name}의 리그를 관리합니다.",
        color=LEAGUE_COLOR,
        timestamp=now_kst()
    )
    embed.add_field(name="👥 팀 관리", value="팀 생성, 삭제, 초기화", inline=True)
    embed.add_field(name="📊 점수 관리", value="점수 추가, 차감", inline=True)
    embed.add_field(name="🔊 팀 이동", value="음성채널로 팀 이동", inline=True)
    embed.add_field(name="📋 팀 목록", value="모든 팀 정보 확인", inline=True)
    embed.add_field(name="⚔️ 밴픽", value="두 팀장에게 DM으로 밴픽 받기", inline=True)
    return embed


def build_team_list_embed(teams: list) -> discord.Embed:
    embed = discord.Embed(title="📋 팀 목록", color=LEAGUE_COLOR, timestamp=now_kst())
    if not teams:
        embed.description = "등록된 팀이 없습니다."
        return embed

    for team in teams[:MAX_SELECT_OPTIONS]:
        members = ", ".join(f"<@{uid}>" for uid in team['members']) or "없음"
        channel = f"<#{team['voice_channel_id']}>" if team['voice_channel_id'] else "설정 안됨"
        captain = f"<@{team['captain_id']}>" if team['captain_id'] else "설정 안됨"
        embed.add_field(
            name=f"🏷️ {team['team_name']}",
            value=(
                f"**점수:** {team['score']}점\n"
                f"**팀장:** {captain}\n"
                f"**팀원:** {members}\n"
                f"**음성채널:** {channel}"
            ),
            inline=False
        )
    return embed


def build_team_setup_embed(team: dict, title: str = "✅ 팀 생성 완료") -> discord.Embed:
    embed = discord.Embed(
        title=title,
        description=f"팀 \"{team['team_name']}\"을(를) 설정합니다.\n아래 메뉴로 팀원, 팀장, 음성채널을 선택하세요.",
        color=discord.Color.green()
    )
    members = ", ".join(f"<@{uid}>" for uid in team['members']) or "없음"
    embed.add_field(name="팀원", value=members, inline=False)
    embed.add_field(name="팀장", value=f"<@{team['captain_id']}>" if team['captain_id'] else "설정 안됨", inline=True)
    embed.add_field(
        name="음성채널",
        value=f"<#{team['voice_channel_id']}>" if team['voice_channel_id'] else "설정 안됨",
        inline=True
    )
    return embed


def build_banpick_progress_embed(team_names: list, count: int) -> discord.Embed:
    embed = discord.Embed(
        title="⚔️ 밴픽 대기 중",
        description="팀장들이 개인 메시지에서 밴픽을 입력하고 있습니다.",
        color=LEAGUE_COLOR
    )
    embed.add_field(name="대결 팀", value=f"**{team_names[0]}** vs **{team_names[1]}**", inline=False)
    embed.add_field(
        name="진행 상태",
        value=f"📤 DM 발송 완료\n⏳ 밴픽 입력 대기 중... ({count}/{BANPICK_TEAM_COUNT})",
        inline=False
    )
    embed.set_footer(text="각 팀장은 개인 메시지에서 밴픽을 입력해주세요.")
    return embed


def build_banpick_result_embed(team_names: list, banpicks: dict) -> discord.Embed:
    embed = discord.Embed(
        title="🎉 밴픽 결과 발표!",
        description="양 팀의 밴픽이 완료되었습니다.",
        color=discord.Color.green(),
        timestamp=now_kst()
    )
    for name in team_names:
        embed.add_field(name=f"{name} 팀 밴픽", value=f"🚫 **{banpicks.get(name, '-')}**", inline=True)
    return embed


class TeamNameModal(discord.ui.Modal, title="➕ 팀 생성"):
    team_name = discord.ui.TextInput(label="팀 이름", placeholder="팀 이름을 입력하세요", max_length=100)

    def __init__(self, panel: "LeaguePanelView"):
        super().__init__()
        self.panel = panel

    async def on_submit(self, interaction: discord.Interaction):
        try:
            name = await create_team(interaction.guild.id, self.team_name.value)
        except LeagueError as e:
            await self.panel.render(interaction, _error_embed(str(e)), self.panel.team_manage_items())
            return
        await send_command_log(interaction.client, interaction.user, "/리그 팀 생성", interaction.guild, f"팀: {name}")
        await self.panel.show_team_setup(interaction, name)


class ScoreModal(discord.ui.Modal):
    score = discord.ui.TextInput(label="점수", placeholder="숫자를 입력하세요", max_length=10)

    def __init__(self, panel: "LeaguePanelView", team_name: str, sign: int):
        super().__init__(title="➕ 점수 추가" if sign > 0 else "➖ 점수 차감")
        self.panel = panel
        self.team_name = team_name
        self.sign = sign

    async def on_submit(self, interaction: discord.Interaction):
        try:
            amount = parse_score(self.score.value)
            total = await change_score(interaction.guild.id, self.team_name, self.sign * amount)
        except LeagueError as e:
            await self.panel.render(interaction, _error_embed(str(e)), self.panel.score_manage_items())
            return

        action = "추가" if self.sign > 0 else "차감"
        embed = discord.Embed(
            title=f"✅ 점수 {action} 완료",
            description=f"팀 \"{self.team_name}\"에 {amount}점이 {action}되었습니다.",
            color=discord.Color.green()
        )
        embed.add_field(name="현재 점수", value=f"{total}점", inline=False)
        await send_command_log(
            interaction.client, interaction.user, f"/리그 점수 {action}", interaction.guild,
            f"팀: {self.team_name}\n변경: {self.sign * amount:+d}\n현재: {total}"
        )
        await self.panel.render(interaction, embed, self.panel.score_manage_items())


class LeaguePanelView(discord.ui.View):
    """리그 관리 패널 (명령어 실행자만 조작 가능)"""

    def __init__(self, owner_id: int, guild: discord.Guild):
        super().__init__(timeout=LEAGUE_VIEW_TIMEOUT)
        self.owner_id = owner_id
        self.guild = guild
        self.message = None

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.owner_id:
            await interaction.response.send_message("❌ 명령어를 실행한 사용자만 사용할 수 있습니다.", ephemeral=True)
            return False
        return True

    async def on_timeout(self):
        if self.message is None:
            return
        embed = discord.Embed(
            title="⏰ 시간 초과",
            description="상호작용 시간이 만료되었습니다. 다시 명령어를 실행해주세요.",
            color=0x808080
        )
        try:
            await self.message.edit(embed=embed, view=None)
        except discord.HTTPException as e:
            print(f"[League] 시간 초과 메시지 수정 실패: {e}")

    async def on_error(self, interaction: discord.Interaction, error: Exception, item):
        print(f"[League] 상호작용 처리 오류: {error}")
        embed = _error_embed("처리 중 오류가 발생했습니다. 다시 시도해주세요.", "⚠️ 오류 발생")
        if interaction.response.is_done():
            await interaction.followup.send(embed=embed, ephemeral=True)
        else:
            await interaction.response.send_message(embed=embed, ephemeral=True)

    # ========== 화면 구성 ==========

    async def render(self, interaction: discord.Interaction, embed: discord.Embed, items: list):
        self.clear_items()
        for item in items:
            self.add_item(item)
        await interaction.response.edit_message(embed=embed, view=self)

    def _button(self, label: str, style: discord.ButtonStyle, callback, row: int = None, disabled: bool = False):
        button = discord.ui.Button(label=label, style=style, row=row, disabled=disabled)
        button.callback = callback
        return button

    def _team_select(self, teams: list, placeholder: str, callback, max_values: int = 1):
        options = [
            discord.SelectOption(label=team['team_name'], value=team['team_name'], description=f"{team['score']}점")
            for team in teams[:MAX_SELECT_OPTIONS]
        ]
        select = discord.ui.Select(
            placeholder=placeholder, options=options,
            min_values=max_values, max_values=max_values
        )

        async def on_select(interaction: discord.Interaction):
            await callback(interaction, select.values)

        select.callback = on_select
        return select

    def _back_button(self, label: str, target):
        return self._button(label, discord.ButtonStyle.secondary, target, row=4)

    def main_items(self) -> list:
        return [
            self._button("👥 팀 관리", discord.ButtonStyle.primary, self.show_team_manage),
            self._button("📊 점수 관리", discord.ButtonStyle.primary, self.show_score_manage),
            self._button("🔊 팀 이동", discord.ButtonStyle.success, self.show_team_move),
            self._button("📋 팀 목록", discord.ButtonStyle.secondary, self.show_team_list),
            self._button("⚔️ 밴픽", discord.ButtonStyle.danger, self.show_banpick),
        ]

    def team_manage_items(self) -> list:
        return [
            self._button("➕ 팀 생성", discord.ButtonStyle.success, self.open_create_modal),
            self._button("❌ 팀 삭제", discord.ButtonStyle.danger, self.show_delete),
            self._button("🗑️ 전체 초기화", discord.ButtonStyle.danger, self.show_reset_confirm),
            self._back_button("🔙 메인으로", self.show_main),
        ]

    def score_manage_items(self) -> list:
        return [
            self._button("➕ 점수 추가", discord.ButtonStyle.success, self.show_score_add),
            self._button("➖ 점수 차감", discord.ButtonStyle.danger, self.show_score_subtract),
            self._back_button("🔙 메인으로", self.show_main),
        ]

    # ========== 메인 ==========

    async def show_main(self, interaction: discord.Interaction):
        await self.render(interaction, build_main_embed(self.guild.name), self.main_items())

    async def show_team_list(self, interaction: discord.Interaction):
        teams = await get_teams(self.guild.id)
        await self.render(interaction, build_team_list_embed(teams), [self._back_button("🔙 메인으로", self.show_main)])

    # ========== 팀 관리 ==========

    async def show_team_manage(self, interaction: discord.Interaction):
        teams = await get_teams(self.guild.id)
        embed = discord.Embed(
            title="👥 팀 관리",
            description=f"현재 등록된 팀: **{len(teams)}개**",
            color=LEAGUE_COLOR
        )
        await self.render(interaction, embed, self.team_manage_items())

    async def open_create_modal(self, interaction: discord.Interaction):
        await interaction.response.send_modal(TeamNameModal(self))

    async def show_team_setup(self, interaction: discord.Interaction, team_name: str, title: str = "✅ 팀 생성 완료"):
        team = await get_team(self.guild.id, team_name)
        if team is None:
            await self.render(interaction, _error_embed(f"팀 \"{team_name}\"을(를) 찾을 수 없습니다."), self.team_manage_items())
            return

        members_select = discord.ui.UserSelect(placeholder="팀원 선택 (최대 25명)", min_values=1, max_values=25)
        captain_select = discord.ui.UserSelect(placeholder="팀장 선택", min_values=1, max_values=1)
        channel_select = discord.ui.ChannelSelect(
            placeholder="음성채널 선택",
            channel_types=[discord.ChannelType.voice],
            min_values=1, max_values=1
        )

        async def on_members(select_interaction: discord.Interaction):
            await add_members(self.guild.id, team_name, [user.id for user in members_select.values])
            await self.show_team_setup(select_interaction, team_name, "✅ 팀원 추가 완료")

        async def on_captain(select_interaction: discord.Interaction):
            await set_captain(self.guild.id, team_name, captain_select.values[0].id)
            await self.show_team_setup(select_interaction, team_name, "✅ 팀장 설정 완료")

        async def on_channel(select_interaction: discord.Interaction):
            await set_voice_channel(self.guild.id, team_name, channel_select.values[0].id)
            await self.show_team_setup(select_interaction, team_name, "✅ 음성채널 설정 완료")

        members_select.callback = on_members
        captain_select.callback = on_captain
        channel_select.callback = on_channel

        await self.render(
            interaction, build_team_setup_embed(team, title),
            [members_select, captain_select, channel_select, self._back_button("🔙 팀 관리로", self.show_team_manage)]
        )

    async def show_delete(self, interaction: discord.Interaction):
        teams = await get_teams(self.guild.id)
        if not teams:
            await self.render(interaction, _error_embed("등록된 팀이 없습니다."), self.team_manage_items())
            return

        async def on_delete(select_interaction: discord.Interaction, values: list):
            team_name = values[0]
            try:
                await delete_team(self.guild.id, team_name)
            except LeagueError as e:
                await self.render(select_interaction, _error_embed(str(e)), self.team_manage_items())
                return
            await send_command_log(select_interaction.client, select_interaction.user, "/리그 팀 삭제", self.guild, f"팀: {team_name}")
            embed = discord.Embed(
                title="✅ 팀 삭제 완료",
                description=f"팀 \"{team_name}\"이(가) 삭제되었습니다.",
                color=discord.Color.green()
            )
            await self.render(select_interaction, embed, self.team_manage_items())

        embed = discord.Embed(title="❌ 팀 삭제", description="삭제할 팀을 선택하세요.", color=discord.Color.red())
        await self.render(interaction, embed, [
            self._team_select(teams, "삭제할 팀 선택", on_delete),
            self._back_button("🔙 팀 관리로", self.show_team_manage),
        ])

    async def show_reset_confirm(self, interaction: discord.Interaction):
        async def on_confirm(confirm_interaction: discord.Interaction):
            await reset_teams(self.guild.id)
            await send_command_log(confirm_interaction.client, confirm_interaction.user, "/리그 전체 초기화", self.guild)
            embed = discord.Embed(
                title="✅ 초기화 완료",
                description="모든 팀 데이터가 초기화되었습니다.",
                color=discord.Color.green()
            )
            await self.render(confirm_interaction, embed, self.team_manage_items())

        embed = discord.Embed(
            title="🗑️ 전체 초기화",
            description="정말로 모든 팀 데이터를 초기화하시겠습니까?\n이 작업은 되돌릴 수 없습니다.",
            color=discord.Color.orange()
        )
        await self.render(interaction, embed, [
            self._button("✅ 확인", discord.ButtonStyle.danger, on_confirm),
            self._button("❌ 취소", discord.ButtonStyle.secondary, self.show_team_manage),
        ])

    # ========== 점수 관리 ==========

    async def show_score_manage(self, interaction: discord.Interaction):
        teams = await get_teams(self.guild.id)
        embed = discord.Embed(title="📊 점수 관리", color=LEAGUE_COLOR)
        if teams:
            embed.description = "\n".join(f"**{team['team_name']}**: {team['score']}점" for team in teams)
        else:
            embed.description = "등록된 팀이 없습니다."
        await self.render(interaction, embed, self.score_manage_items())

    async def show_score_add(self, interaction: discord.Interaction):
        await self._show_score_select(interaction, 1)

    async def show_score_subtract(self, interaction: discord.Interaction):
        await self._show_score_select(interaction, -1)

    async def _show_score_select(self, interaction: discord.Interaction, sign: int):
        teams = await get_teams(self.guild.id)
        if not teams:
            await self.render(interaction, _error_embed("등록된 팀이 없습니다."), self.score_manage_items())
            return

        async def on_select(select_interaction: discord.Interaction, values: list):
            await select_interaction.response.send_modal(ScoreModal(self, values[0], sign))

        title = "➕ 점수 추가" if sign > 0 else "➖ 점수 차감"
        embed = discord.Embed(title=title, description="팀을 선택하세요.", color=LEAGUE_COLOR)
        await self.render(interaction, embed, [
            self._team_select(teams, "팀 선택", on_select),
            self._back_button("🔙 점수 관리로", self.show_score_manage),
        ])

    # ========== 팀 이동 ==========

    async def show_team_move(self, interaction: discord.Interaction):
        teams = await get_teams(self.guild.id)
        if not teams:
            await self.render(interaction, _error_embed("등록된 팀이 없습니다."), self.main_items())
            return

        embed = discord.Embed(title="🔊 팀 이동", description="음성채널로 이동할 팀을 선택하세요.", color=LEAGUE_COLOR)
        await self.render(interaction, embed, [
            self._team_select(teams, "이동할 팀 선택", self.move_team),
            self._back_button("🔙 메인으로", self.show_main),
        ])

    async def move_team(self, interaction: discord.Interaction, values: list):
        team = await get_team(self.guild.id, values[0])
        if team is None:
            await self.render(interaction, _error_embed(f"팀 \"{values[0]}\"을(를) 찾을 수 없습니다."), self.main_items())
            return
        if not team['voice_channel_id']:
            await self.render(interaction, _error_embed(f"팀 \"{team['team_name']}\"에 음성채널이 설정되지 않았습니다."), self.main_items())
            return
        if not interaction.user.guild_permissions.move_members:
            await self.render(interaction, _error_embed("멤버 이동 권한이 필요합니다.", "⚠️ 권한 부족"), self.main_items())
            return

        channel = self.guild.get_channel(team['voice_channel_id'])
        if channel is None:
            await self.render(interaction, _error_embed("설정된 음성채널을 찾을 수 없습니다."), self.main_items())
            return

        await interaction.response.defer()
        moved, failed = 0, 0
        for user_id in team['members']:
            member = self.guild.get_member(user_id)
            if member is None or member.voice is None or member.voice.channel is None:
                continue
            try:
                await member.move_to(channel)
                moved += 1
            except discord.HTTPException as e:
                print(f"[League] {member} 이동 실패: {e}")
                failed += 1

        embed = discord.Embed(
            title="🔊 팀 이동 결과",
            description=f"팀 \"{team['team_name']}\" 이동 완료",
            color=discord.Color.green() if moved > 0 else discord.Color.red()
        )
        embed.add_field(name="이동된 멤버", value=f"{moved}명", inline=True)
        embed.add_field(name="이동 실패", value=f"{failed}명", inline=True)
        embed.add_field(name="대상 채널", value=channel.mention, inline=True)

        self.clear_items()
        for item in self.main_items():
            self.add_item(item)
        await interaction.edit_original_response(embed=embed, view=self)

    # ========== 밴픽 ==========

    async def show_banpick(self, interaction: discord.Interaction):
        teams = [team for team in await get_teams(self.guild.id) if team['captain_id']]
        if len(teams) < BANPICK_TEAM_COUNT:
            await self.render(
                interaction,
                _error_embed("팀장이 설정된 팀이 2개 이상 있어야 밴픽을 진행할 수 있습니다."),
                self.main_items()
            )
            return

        embed = discord.Embed(
            title="⚔️ 밴픽",
            description="밴픽을 진행할 팀 2개를 선택하세요.\n선택한 팀의 팀장에게 DM이 발송됩니다.",
            color=LEAGUE_COLOR
        )
        await self.render(interaction, embed, [
            self._team_select(teams, "대결할 팀 2개 선택", self.begin_banpick, max_values=BANPICK_TEAM_COUNT),
            self._back_button("🔙 메인으로", self.show_main),
        ])

    async def begin_banpick(self, interaction: discord.Interaction, values: list):
        try:
            teams = await start_banpick(self.guild.id, interaction.channel_id, values)
        except LeagueError as e:
            await self.render(interaction, _error_embed(str(e)), self.main_items())
            return

        # 진행 상황은 DM 처리 쪽에서 이 메시지를 수정함
        self.stop()
        await interaction.response.edit_message(embed=build_banpick_progress_embed(values, 0), view=None)
        await set_session_message(self.guild.id, interaction.message.id)
        await send_command_log(interaction.client, interaction.user, "/리그 밴픽", self.guild, " vs ".join(values))

        names = list(teams.keys())
        for team_name, info in teams.items():
            opponent = names[1] if team_name == names[0] else names[0]
            try:
                user = interaction.client.get_user(info['captain']) or await interaction.client.fetch_user(info['captain'])
                embed = discord.Embed(
                    title="⚔️ 밴픽 요청",
                    description=(
                        f"**{self.guild.name}** 리그에서 **{team_name}** vs **{opponent}** 밴픽이 시작되었습니다.\n"
                        f"**{team_name}** 팀장으로서 이 DM에 밴픽할 내용을 입력해주세요."
                    ),
                    color=LEAGUE_COLOR
                )
                await user.send(embed=embed)
            except discord.HTTPException as e:
                print(f"[Banpick] {team_name} 팀장 DM 발송 실패: {e}")
                await interaction.followup.send(
                    f"⚠️ {team_name} 팀장(<@{info['captain']}>)에게 DM을 보낼 수 없습니다. DM 설정을 확인해주세요.",
                    ephemeral=True
                )


async def _fetch_session_message(guild: discord.Guild, session: dict):
    channel = guild.get_channel(session['channel_id'])
    if channel is None or not session.get('message_id'):
        return None
    try:
        return await channel.fetch_message(session['message_id'])
    except discord.HTTPException as e:
        print(f"[Banpick] 진행 메시지를 가져올 수 없습니다: {e}")
        return None


async def handle_banpick_dm(bot, message: discord.Message) -> bool:
    """
    팀장의 DM을 밴픽으로 등록
    Returns: 밴픽 세션에서 처리했는지 여부
    """
    print(f"[Banpick] {message.author}로부터 DM 수신: \"{message.content}\"")

    for guild in bot.guilds:
        session = await get_session(guild.id)
        if session is None or not session['is_active']:
            continue
        if find_captain_team(session, message.author.id) is None:
            continue

        try:
            team_name, count = await submit_banpick(guild.id, message.author.id, message.content)
        except LeagueError as e:
            await message.reply(str(e))
            return True

        await message.reply(f"✅ \"{message.content.strip()}\"이(가) 밴픽으로 등록되었습니다!")

        team_names = list(session['teams'].keys())
        if count < BANPICK_TEAM_COUNT:
            progress_message = await _fetch_session_message(guild, session)
            if progress_message:
                await progress_message.edit(embed=build_banpick_progress_embed(team_names, count), view=None)
            return True

        # 두 밴픽이 동시에 들어와도 세션을 먼저 종료한 쪽만 결과 발표
        if await finish_banpick(guild.id):
            final = await get_session(guild.id)
            banpicks = final['banpicks'] if final else {}
            progress_message = await _fetch_session_message(guild, session)
            if progress_message:
                await progress_message.edit(embed=build_banpick_progress_embed(team_names, count), view=None)
            for remaining in range(BANPICK_COUNTDOWN, 0, -1):
                embed = discord.Embed(
                    title="⚔️ 밴픽 완료!",
                    description=f"밴픽이 완료되었습니다. {remaining}초 후 결과를 표시합니다...",
                    color=0xffaa00
                )
                embed.add_field(name="대결 팀", value=f"**{team_names[0]}** vs **{team_names[1]}**", inline=False)
                if progress_message:
                    await progress_message.edit(embed=embed)
                await asyncio.sleep(1)

            result_embed = build_banpick_result_embed(team_names, banpicks)
            if progress_message:
                await progress_message.edit(embed=result_embed)
            await clear_banpick(guild.id)
            print(f"[Banpick] guild={guild.id} 밴픽 완료: {team_name} 마지막 등록")
        return True

    return False


def league_command(bot):

    @bot.tree.command(name="리그", description="리그 팀/점수/이동/밴픽을 관리합니다")
    @discord.app_commands.guild_only()
    async def slash_league(interaction: discord.Interaction):
        view = LeaguePanelView(interaction.user.id, interaction.guild)
        for item in view.main_items():
            view.add_item(item)
        await interaction.response.send_message(embed=build_main_embed(interaction.guild.name), view=view)
        view.message = await interaction.original_response()
