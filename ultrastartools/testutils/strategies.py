"""
Hypothesis strategies to generate tempo maps and UltraStar chart lines
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

import hypothesis.strategies as st

from ultrastartools import song


@st.composite
def bpm(
    draw: st.DrawFn,
    min_value: Decimal = Decimal(1),
    max_value: Decimal = Decimal(1000),
) -> Decimal:
    value: Decimal = draw(
        st.decimals(min_value=min_value, max_value=max_value, places=2)
    )
    return value


@st.composite
def timing_info(
    draw: st.DrawFn,
    with_bpm_changes: bool = True,
    bpm_strat: st.SearchStrategy[Decimal] = bpm(),
    gap_strat: st.SearchStrategy[int] = st.integers(min_value=0, max_value=20000),
    tick_strat: st.SearchStrategy[int] = st.integers(min_value=1, max_value=10000),
) -> song.Timing:
    first_bpm = draw(bpm_strat)
    events = [song.BPMEvent(tick=0, BPM=first_bpm)]
    if with_bpm_changes:
        ticks = draw(st.sets(tick_strat, max_size=10))
        events += [song.BPMEvent(tick=t, BPM=draw(bpm_strat)) for t in sorted(ticks)]

    gap_ms = draw(gap_strat)
    return song.Timing(events=events, gap=song.SecondsTime(gap_ms, 1000))


syllable_text = st.text(
    alphabet=st.characters(
        blacklist_categories=("Cc", "Cs", "Zl", "Zp"),
    ),
    max_size=8,
)


@dataclass
class NoteLineInfo:
    marker: str
    tick: int
    duration: int
    pitch: int
    syllable: str

    def dump(self) -> str:
        return f"{self.marker} {self.tick} {self.duration} {self.pitch} {self.syllable}"

    @property
    def end(self) -> int:
        return self.tick + self.duration


@st.composite
def note_line(
    draw: st.DrawFn,
    tick_strat: st.SearchStrategy[int] = st.integers(min_value=0, max_value=1000),
    duration_strat: st.SearchStrategy[int] = st.integers(min_value=1, max_value=16),
    pitch_strat: st.SearchStrategy[int] = st.integers(min_value=-24, max_value=48),
) -> NoteLineInfo:
    return NoteLineInfo(
        marker=draw(st.sampled_from([k.value for k in song.NoteKind])),
        tick=draw(tick_strat),
        duration=draw(duration_strat),
        pitch=draw(pitch_strat),
        syllable=draw(syllable_text),
    )


@st.composite
def in_order_note_lines(
    draw: st.DrawFn,
    min_size: int = 1,
    max_size: int = 32,
    max_space: Optional[int] = 8,
) -> List[NoteLineInfo]:
    """Notes that come one after the other without overlapping"""
    raw_notes = draw(
        st.lists(
            note_line(tick_strat=st.integers(min_value=0, max_value=max_space)),
            min_size=min_size,
            max_size=max_size,
        )
    )
    notes = []
    current_tick = 0
    for raw in raw_notes:
        # the drawn tick is used as the space since the end of the last note
        tick = current_tick + raw.tick
        notes.append(
            NoteLineInfo(raw.marker, tick, raw.duration, raw.pitch, raw.syllable)
        )
        current_tick = tick + raw.duration

    return notes


@st.composite
def header_lines(
    draw: st.DrawFn,
    bpm_strat: st.SearchStrategy[Decimal] = bpm(),
    relative: bool = False,
) -> List[str]:
    lines = [
        "#TITLE:Test Song",
        "#ARTIST:Test Artist",
        f"#BPM:{draw(bpm_strat)}",
        f"#GAP:{draw(st.integers(min_value=0, max_value=20000))}",
    ]
    if relative:
        lines.append("#RELATIVE:yes")
    return lines
