import pytest

from mmoclient.defines import UINT64_MAX
from mmoclient.stats import (
    MAX_EXP,
    MAX_LEVEL,
    BaseStats,
    basic_stats,
    need_exp_to_level_up,
)


def test_default_stats_are_zero():
    assert BaseStats() == BaseStats(0, 0, 0, 0, 0, 0, 0, 0)


def test_add_is_fieldwise():
    a = BaseStats(1, 2, 3, 4, 5, 6, 7, 8)
    b = BaseStats(10, 20, 30, 40, 50, 60, 70, 80)
    assert a + b == BaseStats(11, 22, 33, 44, 55, 66, 77, 88)
    assert a == BaseStats(1, 2, 3, 4, 5, 6, 7, 8)


def test_add_wraps_at_sixteen_bits():
    a = BaseStats(hp=65535, atk=65535)
    b = BaseStats(hp=1, atk=2)
    total = a + b
    assert total.hp == 0
    assert total.atk == 1


def test_iadd_mutates_in_place():
    a = BaseStats(1, 1, 1, 1, 1, 1, 1, 1)
    original = a
    a += BaseStats(2, 2, 2, 2, 2, 2, 2, 2)
    assert a is original
    assert a == BaseStats(3, 3, 3, 3, 3, 3, 3, 3)


def test_add_rejects_other_types():
    with pytest.raises(TypeError):
        BaseStats() + 1


def test_basic_stats_level_one():
    assert basic_stats(1) == BaseStats(100, 50, 1, 20, 20, 20, 1, 2)


def test_basic_stats_scales_linearly():
    for level in range(1, 10):
        assert basic_stats(level) + basic_stats(1) == basic_stats(level + 1)


def test_need_exp_level_zero():
    assert need_exp_to_level_up(0) == 100


def test_need_exp_doubles_each_level():
    for level in range(0, MAX_LEVEL - 1):
        assert need_exp_to_level_up(level + 1) == 2 * need_exp_to_level_up(level)


def test_need_exp_at_cap_is_unbounded():
    assert need_exp_to_level_up(MAX_LEVEL) == UINT64_MAX
    assert need_exp_to_level_up(MAX_LEVEL + 5) == UINT64_MAX


def test_max_exp_is_next_after_last_level():
    assert need_exp_to_level_up(MAX_LEVEL - 1) * 2 == MAX_EXP