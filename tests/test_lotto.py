import random

from lotto import generate_lotto_numbers, format_lotto_number


def test_numbers_are_distinct_sorted_and_in_range():
    for seed in range(50):
        numbers, bonus = generate_lotto_numbers(random.Random(seed))
        assert len(numbers) == 6
        assert numbers == sorted(numbers)
        assert len(set(numbers + [bonus])) == 7
        assert all(1 <= n <= 45 for n in numbers + [bonus])


def test_default_rng_produces_valid_draw():
    numbers, bonus = generate_lotto_numbers()
    assert bonus not in numbers


def test_number_colors():
    assert format_lotto_number(1) == "🟡 **1**"
    assert format_lotto_number(10) == "🟡 **10**"
    assert format_lotto_number(11) == "🔵 **11**"
    assert format_lotto_number(30) == "🔴 **30**"
    assert format_lotto_number(40) == "⚫ **40**"
    assert format_lotto_number(45) == "🟢 **45**"
