"""
Turns the lines found after the header of an UltraStar file into candidate
notes

Known line types :
  - B <tick> <bpm>                   : BPM change
  - P<number>                        : start of a singer's part (duets)
  - : <tick> <duration> <pitch> <syl> : normal note
  - F <tick> <duration> <pitch> <syl> : freestyle note (not scored)
  - * <tick> <duration> <pitch> <syl> : golden note (more points)
  - - <tick> [<end tick>]            : line break / rest
  - E                                : end of the track
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

from parsimonious import Grammar, NodeVisitor, ParseError
from parsimonious.nodes import Node

from ultrastartools import song
from ultrastartools.formats.timemap import TempoMap
from ultrastartools.utils import parse_decimal

from .commons import (
    END_MARKER,
    HEADER_MARKER,
    NOTE_MARKERS,
    PLAYER_MARKER,
    SLEEP_MARKER,
    TEMPO_MARKER,
    Candidate,
    ChartLine,
    EndOfTrack,
    FormatError,
    NoteLine,
    PlayerTag,
    SleepLine,
    TempoChange,
)

chart_line_grammar = Grammar(
    r"""
    tempo_line      = "B" ws tick sep bpm ws
    player_line     = "P" ~r".*"
    note_line       = note_marker ws tick sep duration sep pitch syllable_part?
    note_marker     = ":" / "F" / "*"
    syllable_part   = ~r"[\t ]" syllable
    syllable        = ~r".*"
    sleep_line      = "-" sleep_ticks? ws
    sleep_ticks     = ws tick sleep_end?
    sleep_end       = sep tick
    end_line        = "E" ~r".*"
    tick            = ~r"\d+"
    duration        = ~r"\d+"
    pitch           = ~r"-?\d+"
    bpm             = ~r"\d+([.,]\d+)?"
    sep             = ~r"[\t ]+"
    ws              = ~r"[\t ]*"
    """
)

RULE_FOR_MARKER = {
    TEMPO_MARKER: "tempo_line",
    PLAYER_MARKER: "player_line",
    SLEEP_MARKER: "sleep_line",
    END_MARKER: "end_line",
    **{marker: "note_line" for marker in NOTE_MARKERS},
}

LINE_DESCRIPTION = {
    "tempo_line": "BPM",
    "player_line": "player",
    "note_line": "note",
    "sleep_line": "sleep",
    "end_line": "end",
}


class ChartLineVisitor(NodeVisitor):

    """Returns the ChartLine object for the line that was parsed"""

    def visit_tempo_line(self, node: Node, visited_children: List[Any]) -> TempoChange:
        _, _, tick, _, bpm, _ = visited_children
        return TempoChange(tick=tick, BPM=bpm)

    def visit_player_line(self, node: Node, visited_children: List[Any]) -> PlayerTag:
        return PlayerTag(player=node.text[1:].strip())

    def visit_note_line(self, node: Node, visited_children: List[Any]) -> NoteLine:
        kind, _, tick, _, duration, _, pitch, syllable_part = visited_children
        return NoteLine(
            kind=kind,
            tick=tick,
            duration=duration,
            pitch=pitch,
            syllable=syllable_part[0] if isinstance(syllable_part, list) else "",
        )

    def visit_note_marker(
        self, node: Node, visited_children: List[Any]
    ) -> song.NoteKind:
        return NOTE_MARKERS[node.text]

    def visit_syllable_part(self, node: Node, visited_children: List[Any]) -> str:
        _, syllable = visited_children
        return syllable  # type: ignore

    def visit_syllable(self, node: Node, visited_children: List[Any]) -> str:
        return node.text

    def visit_sleep_line(self, node: Node, visited_children: List[Any]) -> SleepLine:
        _, sleep_ticks, _ = visited_children
        if isinstance(sleep_ticks, list):
            return sleep_ticks[0]  # type: ignore
        else:
            return SleepLine()

    def visit_sleep_ticks(self, node: Node, visited_children: List[Any]) -> SleepLine:
        _, tick, sleep_end = visited_children
        end = sleep_end[0] if isinstance(sleep_end, list) else None
        return SleepLine(tick=tick, end=end)

    def visit_sleep_end(self, node: Node, visited_children: List[Any]) -> int:
        _, tick = visited_children
        return tick  # type: ignore

    def visit_end_line(self, node: Node, visited_children: List[Any]) -> EndOfTrack:
        return EndOfTrack()

    def _as_int(self, node: Node, visited_children: List[Any]) -> int:
        return int(node.text)

    visit_tick = visit_duration = visit_pitch = _as_int

    def visit_bpm(self, node: Node, visited_children: List[Any]) -> Decimal:
        return parse_decimal(node.text)

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children or node


def parse_line(raw_line: str) -> Optional[ChartLine]:
    """Returns None for blank lines"""
    line = raw_line.rstrip("\r\n")
    if not line.strip():
        return None

    marker = line[0]
    if marker == HEADER_MARKER:
        raise FormatError("Key found in the middle of notes")

    try:
        rule = RULE_FOR_MARKER[marker]
    except KeyError:
        raise FormatError(f"Unknown note type : {marker!r}") from None

    try:
        tree = chart_line_grammar[rule].parse(line)
    except ParseError:
        raise FormatError(
            f"Invalid {LINE_DESCRIPTION[rule]} line format : {line!r}"
        ) from None

    return ChartLineVisitor().visit(tree)  # type: ignore


@dataclass
class DecodingSession:
    """Everything the decoder has to remember from one line to the next while
    reading a single track"""

    tempo_map: TempoMap = field(default_factory=TempoMap)
    relative: bool = False
    # in relative mode, ticks read from the file are offsets from this tick
    relative_shift: int = 0
    # tick of the last decoded note
    tick: int = 0
    ended: bool = False

    def decode(
        self, chart_line: Optional[ChartLine], track_is_empty: bool = False
    ) -> Optional[Candidate]:
        """Update the session according to the line, return a note if the line
        holds one. track_is_empty tells whether the track had any note
        accepted so far"""
        if chart_line is None or isinstance(chart_line, PlayerTag):
            return None
        elif isinstance(chart_line, EndOfTrack):
            self.ended = True
            return None
        elif isinstance(chart_line, TempoChange):
            self.change_tempo(chart_line)
            return None
        elif isinstance(chart_line, NoteLine):
            candidate = self.decode_note(chart_line)
        elif isinstance(chart_line, SleepLine):
            candidate = self.decode_sleep(chart_line)
        else:
            raise TypeError(f"Unexpected line type : {type(chart_line)}")

        # The first note of a relative track gives the start of the first section
        if self.relative and track_is_empty:
            self.relative_shift = candidate.begin_tick

        self.tick = candidate.begin_tick
        return candidate

    def change_tempo(self, tempo_change: TempoChange) -> None:
        try:
            self.tempo_map.add_breakpoint(tempo_change.tick, tempo_change.BPM)
        except ValueError as e:
            raise FormatError(f"Invalid BPM line : {e}") from e

    def decode_note(self, note_line: NoteLine) -> Candidate:
        begin_tick = note_line.tick
        if self.relative:
            begin_tick += self.relative_shift

        end_tick = begin_tick + note_line.duration
        note = song.Note(
            kind=note_line.kind,
            begin=self.seconds_at(begin_tick),
            end=self.seconds_at(end_tick),
            pitch=note_line.pitch,
            previous_pitch=note_line.pitch,
            syllable=note_line.syllable,
        )
        return Candidate(note=note, begin_tick=begin_tick, end_tick=end_tick)

    def decode_sleep(self, sleep_line: SleepLine) -> Candidate:
        if sleep_line.tick is None:
            begin_tick = end_tick = self.tick
        else:
            begin_tick = sleep_line.tick
            if sleep_line.end is None:
                end_tick = begin_tick
            else:
                end_tick = sleep_line.end

            if self.relative:
                begin_tick += self.relative_shift
                end_tick += self.relative_shift

        if self.relative:
            # the next section starts where this rest ends
            self.relative_shift = end_tick

        sleep = song.Sleep(
            begin=self.seconds_at(begin_tick),
            end=self.seconds_at(end_tick),
        )
        return Candidate(note=sleep, begin_tick=begin_tick, end_tick=end_tick)

    def seconds_at(self, tick: int) -> song.SecondsTime:
        try:
            return self.tempo_map.seconds_at(tick)
        except ValueError as e:
            raise FormatError(str(e)) from e
