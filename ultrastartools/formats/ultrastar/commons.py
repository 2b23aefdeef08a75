from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

from ultrastartools import song

TEMPO_MARKER = "B"
PLAYER_MARKER = "P"
SLEEP_MARKER = "-"
END_MARKER = "E"
HEADER_MARKER = "#"

NOTE_MARKERS = {kind.value: kind for kind in song.NoteKind}


class SongParserError(ValueError):
    """Parsing the song file failed, the line number (1-based) is attached
    when the error can be traced back to a specific line"""

    def __init__(
        self, message: str, line: Optional[int] = None, path: Optional[Path] = None
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.path = path

    def at(
        self, line: Optional[int] = None, path: Optional[Path] = None
    ) -> SongParserError:
        """Copy of this error with some added context"""
        return type(self)(
            self.message,
            line=self.line if line is None else line,
            path=self.path if path is None else path,
        )

    def __str__(self) -> str:
        location = []
        if self.path is not None:
            location.append(str(self.path))
        if self.line is not None:
            location.append(f"line {self.line}")

        if location:
            return f"{self.message} ({', '.join(location)})"
        else:
            return self.message


class FormatError(SongParserError):
    """The file does not follow the format, the track can't be loaded"""


class EmptyTrackError(SongParserError):
    """The file follows the format but there is nothing to sing"""


class OverlapWarning(UserWarning):
    """Overlapping notes were found, the previous note got shortened or the
    new one got dropped"""


@dataclass(frozen=True)
class TempoChange:
    tick: int
    BPM: Decimal


@dataclass(frozen=True)
class PlayerTag:
    """Duet files mark the beginning of each singer's part with these"""

    player: str


@dataclass(frozen=True)
class NoteLine:
    kind: song.NoteKind
    tick: int
    duration: int
    pitch: int
    syllable: str = ""


@dataclass(frozen=True)
class SleepLine:
    """tick is None when the line has no timestamp at all, in which case the
    tick of the previous note is used"""

    tick: Optional[int] = None
    end: Optional[int] = None


@dataclass(frozen=True)
class EndOfTrack:
    pass


ChartLine = Union[TempoChange, PlayerTag, NoteLine, SleepLine, EndOfTrack]


@dataclass(frozen=True)
class Candidate:
    """A note decoded from a line, not yet placed on the timeline.
    Ticks are absolute (relative mode shift already applied)"""

    note: song.AnyNote
    begin_tick: int
    end_tick: int


def looks_like_ultrastar(text: str) -> bool:
    """UltraStar files start right away with a header field like #TITLE"""
    text = text.lstrip("\ufeff")
    return len(text) >= 2 and text[0] == HEADER_MARKER and "A" <= text[1] <= "Z"
