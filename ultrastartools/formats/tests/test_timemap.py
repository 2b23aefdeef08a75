from decimal import Decimal
from fractions import Fraction

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ultrastartools import song
from ultrastartools.formats.timemap import TICKS_PER_BEAT, TempoMap
from ultrastartools.testutils import strategies as ustst


@given(ustst.timing_info(with_bpm_changes=True), st.integers(0, 20000))
def test_that_seconds_at_tick_works_like_the_naive_approach(
    timing: song.Timing, tick: int
) -> None:
    tempo_map = TempoMap.from_timing(timing)
    expected = naive_approach(timing, tick)
    actual = tempo_map.seconds_at(tick)
    assert actual == expected


def naive_approach(timing: song.Timing, tick: int) -> Fraction:
    """Sum the length of every tick interval, one interval at a time"""
    total_seconds = Fraction(timing.gap)
    events = list(timing.events)
    for current, following in zip(events, events[1:] + [None]):
        if current.tick >= tick:
            break
        interval_end = tick if following is None else min(tick, following.tick)
        interval_length = interval_end - current.tick
        total_seconds += (interval_length / Fraction(current.BPM)) * 60 / 4

    return total_seconds


@given(ustst.bpm(), st.integers(0, 100000))
def test_that_a_constant_tempo_is_linear(bpm: Decimal, tick: int) -> None:
    tempo_map = TempoMap()
    tempo_map.add_breakpoint(0, bpm)
    assert tempo_map.seconds_at(2 * tick) == 2 * tempo_map.seconds_at(tick)


def test_that_a_beat_lasts_half_a_second_at_120_bpm() -> None:
    tempo_map = TempoMap()
    tempo_map.add_breakpoint(0, Decimal(120))
    assert tempo_map.seconds_at(0) == 0
    assert tempo_map.seconds_at(TICKS_PER_BEAT) == Fraction(1, 2)
    assert tempo_map.seconds_at(4 * TICKS_PER_BEAT) == 2


def test_that_the_gap_shifts_everything() -> None:
    tempo_map = TempoMap(gap=Fraction(3, 2))
    tempo_map.add_breakpoint(0, Decimal(60))
    assert tempo_map.seconds_at(0) == Fraction(3, 2)
    assert tempo_map.seconds_at(4) == Fraction(5, 2)


def test_bpm_changes() -> None:
    tempo_map = TempoMap()
    tempo_map.add_breakpoint(0, Decimal(60))
    tempo_map.add_breakpoint(8, Decimal(120))
    # 8 ticks at 60 BPM (2s) then 4 ticks at 120 BPM (0.5s)
    assert tempo_map.seconds_at(8) == 2
    assert tempo_map.seconds_at(12) == Fraction(5, 2)


def test_that_a_bpm_change_on_the_same_tick_replaces_the_previous_one() -> None:
    tempo_map = TempoMap()
    tempo_map.add_breakpoint(0, Decimal(60))
    tempo_map.add_breakpoint(8, Decimal(100))
    tempo_map.add_breakpoint(8, Decimal(120))
    assert len(tempo_map.events_by_ticks) == 2
    assert tempo_map.seconds_at(12) == Fraction(5, 2)


def test_that_bpm_changes_cant_go_back_in_time() -> None:
    tempo_map = TempoMap()
    tempo_map.add_breakpoint(0, Decimal(60))
    tempo_map.add_breakpoint(8, Decimal(100))
    with pytest.raises(ValueError, match="comes before"):
        tempo_map.add_breakpoint(4, Decimal(120))


@pytest.mark.parametrize("bpm", [Decimal(0), Decimal("0.5"), Decimal(-120)])
def test_that_invalid_bpms_are_refused(bpm: Decimal) -> None:
    tempo_map = TempoMap()
    with pytest.raises(ValueError, match="Invalid BPM"):
        tempo_map.add_breakpoint(0, bpm)


def test_that_only_tick_zero_works_without_bpm() -> None:
    tempo_map = TempoMap(gap=Fraction(1))
    assert tempo_map.seconds_at(0) == 1
    with pytest.raises(ValueError, match="BPM data missing"):
        tempo_map.seconds_at(1)


def test_that_the_first_bpm_change_must_be_on_tick_zero() -> None:
    tempo_map = TempoMap()
    with pytest.raises(ValueError, match="BPM data missing"):
        tempo_map.add_breakpoint(16, Decimal(120))


def test_negative_ticks() -> None:
    tempo_map = TempoMap()
    tempo_map.add_breakpoint(0, Decimal(120))
    with pytest.raises(ValueError):
        tempo_map.seconds_at(-1)


@given(ustst.timing_info(with_bpm_changes=True))
def test_that_timing_info_survives_the_tempo_map(timing: song.Timing) -> None:
    assert TempoMap.from_timing(timing).convert_to_timing_info() == timing
