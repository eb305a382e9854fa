# lotto.py - 로또 6/45 번호 생성

import random
from typing import List, Tuple

LOTTO_MAX_NUMBER = 45
LOTTO_PICK_COUNT = 6


def generate_lotto_numbers(rng: random.Random = None) -> Tuple[List[int], int]:
    """
    1~45 중 중복 없이 7개 추첨 (Fisher-Yates 셔플)
    Returns: (오름차순 당첨번호 6개, 보너스번호)
    """
    rng = rng or random.SystemRandom()
    numbers = list(range(1, LOTTO_MAX_NUMBER + 1))

    for i in range(len(numbers) - 1, 0, -1):
        j = rng.randint(0, i)
        numbers[i], numbers[j] = numbers[j], numbers[i]

    main_numbers = sorted(numbers[:LOTTO_PICK_COUNT])
    bonus_number = numbers[LOTTO_PICK_COUNT]
    return main_numbers, bonus_number


def format_lotto_number(number: int) -> str:
    """번호 구간별 색상 원 이모지"""
    if number <= 10:
        return f"🟡 **{number}**"
    if number <= 20:
        return f"🔵 **{number}**"
    if number <= 30:
        return f"🔴 **{number}**"
    if number <= 40:
        return f"⚫ **{number}**"
    return f"🟢 **{number}**"
