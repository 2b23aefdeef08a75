"""
Parsing of the header of UltraStar files

Header lines look like #KEY:VALUE, known keys :
  - #TITLE, #ARTIST, #EDITION, #GENRE, #CREATOR, #LANGUAGE, #YEAR
  - #MP3, #VOCALS            : audio files
  - #COVER, #BACKGROUND, #VIDEO
  - #BPM=<decimal>           : tempo at tick 0, in quarter beats per minute
  - #GAP=<decimal>           : time of tick 0, in ms
  - #RELATIVE={yes, no}      : note ticks restart from zero after each rest
  - #START, #VIDEOGAP, #PREVIEWSTART : in seconds

Unknown keys are ignored
"""

from decimal import Decimal
from fractions import Fraction
from pathlib import Path
from typing import Optional

from ultrastartools import song
from ultrastartools.formats.timemap import TempoMap
from ultrastartools.utils import parse_decimal

from .commons import HEADER_MARKER, EmptyTrackError, FormatError
from .decoder import DecodingSession

TRUE_VALUES = {"yes", "true", "1"}
FALSE_VALUES = {"no", "false", "0"}


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    elif lowered in FALSE_VALUES:
        return False
    else:
        raise ValueError(f"{value!r} is not a valid boolean value")


def parse_seconds(value: str) -> song.SecondsTime:
    return song.SecondsTime(parse_decimal(value))


class HeaderParser:
    def __init__(self, folder: Optional[Path] = None) -> None:
        self.folder = folder or Path()
        self.metadata = song.Metadata()
        self.bpm: Optional[Decimal] = None
        self.gap = song.SecondsTime(0)
        self.relative = False

    def parse_field(self, line: str) -> bool:
        """Returns False once the line is not part of the header anymore"""
        line = line.strip()
        if not line:
            return True

        if not line.startswith(HEADER_MARKER):
            return False

        key, colon, value = line[1:].partition(":")
        if not colon:
            raise FormatError("Invalid txt format, should be #key:value")

        self.handle_field(key.strip(), value.strip())
        return True

    def handle_field(self, key: str, value: str) -> None:
        if not value:
            return

        method = getattr(self, f"do_{key.lower()}", None)
        if method is None:
            return

        try:
            method(value)
        except ValueError as e:
            raise FormatError(f"Invalid #{key} value : {e}") from None

    def do_title(self, value: str) -> None:
        self.metadata.title = value.lstrip(" :")

    def do_artist(self, value: str) -> None:
        self.metadata.artist = value

    def do_edition(self, value: str) -> None:
        self.metadata.edition = value

    def do_genre(self, value: str) -> None:
        self.metadata.genre = value

    def do_creator(self, value: str) -> None:
        self.metadata.creator = value

    def do_language(self, value: str) -> None:
        self.metadata.language = value

    def do_year(self, value: str) -> None:
        self.metadata.year = value

    def do_cover(self, value: str) -> None:
        self.metadata.cover = self.folder / value

    def do_background(self, value: str) -> None:
        self.metadata.background = self.folder / value

    def do_video(self, value: str) -> None:
        self.metadata.video = self.folder / value

    def do_mp3(self, value: str) -> None:
        self.metadata.audio = self.folder / value

    def do_vocals(self, value: str) -> None:
        self.metadata.vocals = self.folder / value

    def do_start(self, value: str) -> None:
        self.metadata.start = parse_seconds(value)

    def do_videogap(self, value: str) -> None:
        self.metadata.video_gap = parse_seconds(value)

    def do_previewstart(self, value: str) -> None:
        self.metadata.preview_start = parse_seconds(value)

    def do_relative(self, value: str) -> None:
        self.relative = parse_bool(value)

    def do_gap(self, value: str) -> None:
        self.gap = Fraction(parse_decimal(value)) / 1000

    def do_bpm(self, value: str) -> None:
        self.bpm = parse_decimal(value)

    def raise_if_incomplete(self) -> None:
        if not (self.metadata.title and self.metadata.artist):
            raise EmptyTrackError("Required header fields missing")

    def tempo_map(self) -> TempoMap:
        tempo_map = TempoMap(gap=self.gap)
        if self.bpm is not None:
            try:
                tempo_map.add_breakpoint(0, self.bpm)
            except ValueError as e:
                raise FormatError(f"Invalid #BPM value : {e}") from None

        return tempo_map

    def decoding_session(self) -> DecodingSession:
        return DecodingSession(tempo_map=self.tempo_map(), relative=self.relative)
