"""Provides the Song class, the central model for vocal charts
Every input format is converted to a Song instance
Every output format is created from a Song instance

Chart positions are stored as integer ticks in the timing info, notes are
already resolved to an exact number of seconds"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import Path
from typing import Iterator, Mapping, Optional, Sequence, Tuple, Union

SecondsTime = Fraction


class TrackName:
    LEAD_VOCAL = "Vocals"
    HARMONIC_1 = "Harmonic 1"
    HARMONIC_2 = "Harmonic 2"
    HARMONIC_3 = "Harmonic 3"


class NoteKind(str, Enum):
    """Sung note kinds, the values are the markers used in UltraStar files"""

    NORMAL = ":"
    FREESTYLE = "F"
    GOLDEN = "*"


@dataclass(frozen=True)
class Note:
    kind: NoteKind
    begin: SecondsTime
    end: SecondsTime
    pitch: int
    # no slides in the formats supported so far, always equal to pitch
    previous_pitch: int
    syllable: str = ""
    line_break: bool = False

    @property
    def duration(self) -> SecondsTime:
        return self.end - self.begin


@dataclass(frozen=True)
class Sleep:
    """A rest between two lyrics lines"""

    begin: SecondsTime
    end: SecondsTime
    line_break: bool = False

    @property
    def duration(self) -> SecondsTime:
        return self.end - self.begin


AnyNote = Union[Note, Sleep]


@dataclass(frozen=True)
class BPMEvent:
    tick: int
    BPM: Decimal


@dataclass(unsafe_hash=True)
class Timing:
    events: Sequence[BPMEvent]
    gap: SecondsTime = SecondsTime(0)

    def __post_init__(self) -> None:
        self.events = tuple(self.events)


@dataclass(frozen=True)
class VocalTrack:
    name: str
    notes: Tuple[AnyNote, ...] = ()
    pitch_min: Optional[int] = None
    pitch_max: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "notes", tuple(self.notes))

    def sung_notes(self) -> Iterator[Note]:
        return (n for n in self.notes if isinstance(n, Note))

    @property
    def begin(self) -> Optional[SecondsTime]:
        return self.notes[0].begin if self.notes else None

    @property
    def end(self) -> Optional[SecondsTime]:
        return self.notes[-1].end if self.notes else None


@dataclass
class Metadata:
    title: Optional[str] = None
    artist: Optional[str] = None
    edition: Optional[str] = None
    genre: Optional[str] = None
    creator: Optional[str] = None
    language: Optional[str] = None
    year: Optional[str] = None
    cover: Optional[Path] = None
    background: Optional[Path] = None
    video: Optional[Path] = None
    audio: Optional[Path] = None
    vocals: Optional[Path] = None
    start: Optional[SecondsTime] = None
    video_gap: Optional[SecondsTime] = None
    preview_start: Optional[SecondsTime] = None


@dataclass
class Song:
    """The abstract representation format for all vocal charts.
    A Song is a set of vocal tracks with associated metadata and the timing
    info they were decoded with"""

    metadata: Metadata
    tracks: Mapping[str, VocalTrack] = field(default_factory=dict)
    timing: Optional[Timing] = None
    # True if some notes had to be moved, shortened or dropped while loading
    has_corrected_tracks: bool = False

    def get_vocal_track(self, name: str = TrackName.LEAD_VOCAL) -> VocalTrack:
        """Get the requested track, or the lead vocals if it doesn't exist, or
        the first track there is, or an empty lead vocals track"""
        if name in self.tracks:
            return self.tracks[name]
        elif TrackName.LEAD_VOCAL in self.tracks:
            return self.tracks[TrackName.LEAD_VOCAL]
        elif self.tracks:
            return next(iter(self.tracks.values()))
        else:
            return VocalTrack(TrackName.LEAD_VOCAL)
