import math

from switchplus.progression.xp_curve import MAX_LEVEL, progress_for, requirement


def test_first_levels_match_quantized_curve():
    # 22.5 rounds half up to 25, not banker's rounding down to 20
    assert [requirement(level) for level in range(1, 8)] == [10, 15, 25, 35, 50, 75, 115]


def test_curve_strictly_increasing_and_quantized():
    for level in range(1, MAX_LEVEL):
        assert requirement(level + 1) > requirement(level)
        assert requirement(level) % 5 == 0


def test_cap_is_infinite():
    assert MAX_LEVEL == 20
    assert requirement(20) == math.inf
    assert requirement(25) == math.inf


def test_progress_readout():
    progress = progress_for(2, 6)
    assert progress.current == 6
    assert progress.required == 15
    assert progress.percentage == 6 / 15

    capped = progress_for(MAX_LEVEL, 0)
    assert (capped.current, capped.required, capped.percentage) == (1, 1, 1.0)
