from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

from marshmallow import EXCLUDE, Schema, post_dump, validate
from marshmallow_dataclass import class_schema

NOTE_TYPES = ("normal", "freestyle", "golden", "sleep")


@dataclass
class Metadata:
    title: Optional[str]
    artist: Optional[str]
    edition: Optional[str]
    genre: Optional[str]
    creator: Optional[str]
    language: Optional[str]
    year: Optional[str]
    audio: Optional[str]
    vocals: Optional[str]
    cover: Optional[str]
    background: Optional[str]
    video: Optional[str]
    start: Optional[Decimal]
    video_gap: Optional[Decimal]
    preview_start: Optional[Decimal]


@dataclass
class BPMEvent:
    tick: int = field(metadata={"validate": validate.Range(min=0)})
    bpm: Decimal = field(metadata={"validate": validate.Range(min=1)})


@dataclass
class Tempo:
    gap: Decimal
    ticks_per_beat: int = field(metadata={"validate": validate.Range(min=1)})
    bpms: List[BPMEvent]


@dataclass
class Note:
    type: str = field(metadata={"validate": validate.OneOf(NOTE_TYPES)})
    begin: Decimal
    end: Decimal
    pitch: Optional[int] = None
    syllable: Optional[str] = None
    line_break: Optional[bool] = None


@dataclass
class Track:
    name: str
    pitch_min: Optional[int]
    pitch_max: Optional[int]
    notes: List[Note]


@dataclass
class File:
    version: str = field(metadata={"validate": validate.Equal("1.0.0")})
    metadata: Metadata
    tempo: Optional[Tempo]
    corrected: bool
    tracks: List[Track]


class BaseSchema(Schema):
    class Meta:
        ordered = True
        unknown = EXCLUDE

    @post_dump
    def _remove_none_values(self, data: dict, **kwargs: Any) -> dict:
        return remove_none_values(data)


def remove_none_values(data: dict) -> dict:
    return {key: value for key, value in data.items() if value is not None}


FILE_SCHEMA = class_schema(File, base_schema=BaseSchema)()
