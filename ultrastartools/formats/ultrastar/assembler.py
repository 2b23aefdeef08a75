"""Places decoded notes one after the other on the vocal track timeline.

Lots of charts out there have overlapping notes, refusing to load them is
not an option, so instead notes get shortened or moved when possible. The
correction only ever looks at the last accepted note (and the one before it
when the last one is a rest), so the result depends on the order the notes
come in."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ultrastartools import song

from .commons import Candidate, EmptyTrackError, FormatError, OverlapWarning


@dataclass(frozen=True)
class Accepted:
    """The note goes on the track. If corrected_previous is not None it
    replaces the last note of the track"""

    note: song.AnyNote
    corrected_previous: Optional[song.AnyNote] = None
    # the previous note had to be shortened or moved to make room
    fixed_overlap: bool = False


@dataclass(frozen=True)
class Ignored:
    """Rests before the first note mean nothing"""


@dataclass(frozen=True)
class Dropped:
    reason: str


Placement = Union[Accepted, Ignored, Dropped]


def place_note(
    notes: Sequence[song.AnyNote],
    candidate: song.AnyNote,
    previous_end: song.SecondsTime,
) -> Placement:
    """Decide what happens to the candidate given the notes already on the
    track and the end time of the last accepted candidate, as it was written
    in the file.
    Accepted rests are moved to the end of the previous note as it stands
    after any correction, not to the end it was written with.
    Raises FormatError if the first note starts before the beginning"""
    corrected_previous = None
    fixed_overlap = candidate.begin < previous_end
    if fixed_overlap:
        if not notes:
            raise FormatError("The first note has a negative timestamp")

        corrected_previous = fix_overlap(notes, candidate)
        if corrected_previous is None:
            return Dropped(
                f"Skipping overlapping note at {float(candidate.begin):.3f}s"
            )

    if isinstance(candidate, song.Sleep):
        if not notes:
            return Ignored()

        # Rests take no time, they just end the line of lyrics
        previous = corrected_previous or notes[-1]
        candidate = replace(candidate, begin=previous.end, end=previous.end)
        corrected_previous = replace(previous, line_break=True)

    return Accepted(
        note=candidate,
        corrected_previous=corrected_previous,
        fixed_overlap=fixed_overlap,
    )


def fix_overlap(
    notes: Sequence[song.AnyNote], candidate: song.AnyNote
) -> Optional[song.AnyNote]:
    """Returns a corrected version of the last note that does not overlap the
    candidate anymore, or None if there is no way to make them fit"""
    previous = notes[-1]
    if isinstance(previous, song.Sleep):
        # Some charts use semi-random timestamps for rests
        previous = replace(previous, end=previous.begin)
        if len(notes) >= 2 and notes[-2].end < candidate.begin:
            previous = replace(previous, begin=candidate.begin, end=candidate.begin)

    if previous.begin <= candidate.begin:
        return replace(previous, end=candidate.begin)
    else:
        return None


class VocalTrackAssembler:
    """Builds a VocalTrack from the candidates given by the decoder"""

    def __init__(
        self, name: str = song.TrackName.LEAD_VOCAL, path: Optional[Path] = None
    ) -> None:
        self.name = name
        self.path = path
        self.notes: List[song.AnyNote] = []
        self.pitch_min: Optional[int] = None
        self.pitch_max: Optional[int] = None
        # end of the last accepted candidate, before normalization
        self.previous_end = song.SecondsTime(0)
        self.corrections: List[str] = []

    @property
    def is_empty(self) -> bool:
        return not self.notes

    @property
    def has_corrections(self) -> bool:
        return bool(self.corrections)

    def add(self, candidate: Union[Candidate, song.AnyNote]) -> Placement:
        note = candidate.note if isinstance(candidate, Candidate) else candidate
        placement = place_note(self.notes, note, self.previous_end)
        if isinstance(placement, Dropped):
            self.warn(placement.reason)
        elif isinstance(placement, Accepted):
            if placement.fixed_overlap:
                self.warn(
                    f"Shortened the note before the one at "
                    f"{float(note.begin):.3f}s to remove an overlap"
                )
            self.accept(placement, authored_end=note.end)

        return placement

    def accept(self, placement: Accepted, authored_end: song.SecondsTime) -> None:
        if placement.corrected_previous is not None:
            self.notes[-1] = placement.corrected_previous

        note = placement.note
        if isinstance(note, song.Note) and note.end > note.begin:
            self.include_pitch(note.pitch)

        self.notes.append(note)
        self.previous_end = authored_end

    def include_pitch(self, pitch: int) -> None:
        if self.pitch_min is None or pitch < self.pitch_min:
            self.pitch_min = pitch
        if self.pitch_max is None or pitch > self.pitch_max:
            self.pitch_max = pitch

    def warn(self, reason: str) -> None:
        self.corrections.append(reason)
        location = f" of {self.path}" if self.path is not None else ""
        warnings.warn(
            f"{reason} in the {self.name} track{location}", OverlapWarning, stacklevel=3
        )

    def finish(self) -> song.VocalTrack:
        notes = list(self.notes)
        # A rest right before the end only leaves its line break behind
        if notes and isinstance(notes[-1], song.Sleep):
            notes.pop()
        # Some converters end the track with a ": 1 0 0" line
        elif notes and notes[-1].duration == 0:
            notes.pop()

        if not notes:
            raise EmptyTrackError(f"No notes found in the {self.name} track")

        return song.VocalTrack(
            name=self.name,
            notes=tuple(notes),
            pitch_min=self.pitch_min,
            pitch_max=self.pitch_max,
        )


def assemble(
    notes: Sequence[song.AnyNote], name: str = song.TrackName.LEAD_VOCAL
) -> VocalTrackAssembler:
    """Run the notes through an assembler as if they had just been decoded"""
    assembler = VocalTrackAssembler(name)
    for note in notes:
        assembler.add(note)
    return assembler
