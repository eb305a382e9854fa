# commands/lotto_command.py - /로또번호 명령어

import discord

from lotto import generate_lotto_numbers, format_lotto_number
from utils import now_kst, get_display_name


def lotto_command(bot):

    @bot.tree.command(name="로또번호", description="로또 번호를 생성합니다")
    async def slash_lotto(interaction: discord.Interaction):
        numbers, bonus = generate_lotto_numbers()

        embed = discord.Embed(
            title="🎰 로또 번호 생성",
            description="  ".join(format_lotto_number(n) for n in numbers),
            color=discord.Color.gold(),
            timestamp=now_kst()
        )
        embed.add_field(name="보너스 번호", value=format_lotto_number(bonus), inline=False)
        embed.set_footer(text=f"{get_display_name(interaction.user)}님, 행운을 빕니다! 🍀")
        await interaction.response.send_message(embed=embed)
