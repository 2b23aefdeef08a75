from decimal import Decimal
from fractions import Fraction
from pathlib import Path
from typing import Any, Dict

import simplejson as json

from ultrastartools import song as ust
from ultrastartools.formats.dump_tools import FileNameFormat
from ultrastartools.formats.timemap import TICKS_PER_BEAT
from ultrastartools.utils import fraction_to_decimal, none_or

from . import schema as timeline

MICROSECOND = Decimal("0.000001")


def dump_timeline(song: ust.Song, path: Path, **kwargs: Any) -> Dict[Path, bytes]:
    name_format = FileNameFormat("{title}.json", suggestion=path)
    filepath = name_format.available_filename_for(song)
    return {filepath: _dump_timeline(song, **kwargs)}


def _dump_timeline(song: ust.Song, **kwargs: Any) -> bytes:
    file = timeline.File(
        version="1.0.0",
        metadata=dump_metadata(song.metadata),
        tempo=none_or(dump_tempo, song.timing),
        corrected=song.has_corrected_tracks,
        tracks=[dump_track(track) for track in song.tracks.values()],
    )
    json_file = timeline.FILE_SCHEMA.dump(file)
    return json.dumps(
        json_file, indent=4, use_decimal=True, ensure_ascii=False
    ).encode("utf-8")


def dump_metadata(metadata: ust.Metadata) -> timeline.Metadata:
    return timeline.Metadata(
        title=metadata.title,
        artist=metadata.artist,
        edition=metadata.edition,
        genre=metadata.genre,
        creator=metadata.creator,
        language=metadata.language,
        year=metadata.year,
        audio=none_or(str, metadata.audio),
        vocals=none_or(str, metadata.vocals),
        cover=none_or(str, metadata.cover),
        background=none_or(str, metadata.background),
        video=none_or(str, metadata.video),
        start=none_or(dump_seconds, metadata.start),
        video_gap=none_or(dump_seconds, metadata.video_gap),
        preview_start=none_or(dump_seconds, metadata.preview_start),
    )


def dump_tempo(timing: ust.Timing) -> timeline.Tempo:
    return timeline.Tempo(
        gap=dump_seconds(timing.gap),
        ticks_per_beat=TICKS_PER_BEAT,
        bpms=[timeline.BPMEvent(tick=e.tick, bpm=e.BPM) for e in timing.events],
    )


def dump_track(track: ust.VocalTrack) -> timeline.Track:
    return timeline.Track(
        name=track.name,
        pitch_min=track.pitch_min,
        pitch_max=track.pitch_max,
        notes=[dump_note(note) for note in track.notes],
    )


def dump_note(note: ust.AnyNote) -> timeline.Note:
    if isinstance(note, ust.Sleep):
        return timeline.Note(
            type="sleep",
            begin=dump_seconds(note.begin),
            end=dump_seconds(note.end),
            line_break=note.line_break or None,
        )

    return timeline.Note(
        type=note.kind.name.lower(),
        begin=dump_seconds(note.begin),
        end=dump_seconds(note.end),
        pitch=note.pitch,
        syllable=note.syllable,
        line_break=note.line_break or None,
    )


def dump_seconds(seconds: Fraction) -> Decimal:
    return fraction_to_decimal(Fraction(seconds)).quantize(MICROSECOND)

