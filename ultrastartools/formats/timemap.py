from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
from typing import Union

from sortedcontainers import SortedKeyList

from ultrastartools import song
from ultrastartools.utils import fraction_to_decimal

# UltraStar BPM values count quarter beats, so a tick is a sixteenth note
TICKS_PER_BEAT = 4

MIN_BPM = Fraction(1)
MAX_BPM = Fraction(10**12)

Number = Union[int, Decimal, Fraction]


@dataclass
class BPMChange:
    tick: int
    seconds: Fraction
    BPM: Fraction


def seconds_per_tick(bpm: Fraction) -> Fraction:
    return Fraction(60) / (TICKS_PER_BEAT * bpm)


@dataclass
class TempoMap:
    """Piecewise constant tempo, allows converting symbolic time (in ticks)
    to clock time (in seconds). The seconds at which each BPM change happens
    are computed once when the change is added"""

    gap: Fraction = Fraction(0)
    events_by_ticks: SortedKeyList = field(
        default_factory=lambda: SortedKeyList(key=lambda b: b.tick)
    )

    @classmethod
    def from_timing(cls, timing: song.Timing) -> TempoMap:
        """Create a tempo map from a song.Timing object"""
        tempo_map = cls(gap=Fraction(timing.gap))
        for event in timing.events:
            tempo_map.add_breakpoint(event.tick, event.BPM)

        return tempo_map

    def add_breakpoint(self, tick: int, bpm: Number) -> None:
        """BPM changes have to be added in order. Adding one on the same tick
        as the last one replaces it, adding one before the last one is an
        error"""
        if tick < 0:
            raise ValueError(f"Can't change the BPM at negative tick {tick}")

        frac_bpm = Fraction(bpm)
        if not MIN_BPM <= frac_bpm < MAX_BPM:
            raise ValueError(f"Invalid BPM value : {bpm}")

        if self.events_by_ticks:
            last: BPMChange = self.events_by_ticks[-1]
            if tick < last.tick:
                raise ValueError(
                    f"BPM change on tick {tick} comes before the previous one "
                    f"on tick {last.tick}"
                )
            elif tick == last.tick:
                # Some charts define the same BPM change twice
                self.events_by_ticks.remove(last)

        seconds = self.fractional_seconds_at(tick)
        self.events_by_ticks.add(BPMChange(tick, seconds, frac_bpm))

    def seconds_at(self, tick: int) -> song.SecondsTime:
        return self.fractional_seconds_at(tick)

    def fractional_seconds_at(self, tick: int) -> Fraction:
        """Time elapsed since the start of the audio when reaching the given
        tick, the gap included"""
        if tick < 0:
            raise ValueError(f"Can't compute seconds at negative tick {tick}")

        if not self.events_by_ticks:
            if tick != 0:
                raise ValueError("BPM data missing")
            return self.gap

        # find previous bpm change
        index = self.events_by_ticks.bisect_key_right(tick) - 1
        if index < 0:
            first: BPMChange = self.events_by_ticks[0]
            raise ValueError(
                f"Tick {tick} comes before the first BPM change on tick {first.tick}"
            )

        bpm_change: BPMChange = self.events_by_ticks[index]

        # compute seconds since last bpm change
        ticks_since_last_event = tick - bpm_change.tick
        seconds_since_last_event = ticks_since_last_event * seconds_per_tick(
            bpm_change.BPM
        )
        return bpm_change.seconds + seconds_since_last_event

    def convert_to_timing_info(self) -> song.Timing:
        return song.Timing(
            events=[
                song.BPMEvent(tick=e.tick, BPM=fraction_to_decimal(e.BPM))
                for e in self.events_by_ticks
            ],
            gap=self.gap,
        )
