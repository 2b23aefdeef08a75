from decimal import Decimal
from fractions import Fraction
from pathlib import Path

import pytest

from ultrastartools.formats.ultrastar.commons import EmptyTrackError, FormatError
from ultrastartools.formats.ultrastar.header import HeaderParser, parse_bool


def parse(*lines: str, folder: Path = Path("songs")) -> HeaderParser:
    header = HeaderParser(folder)
    for line in lines:
        assert header.parse_field(line)
    return header


def test_common_fields() -> None:
    header = parse(
        "#TITLE:Some Song",
        "#ARTIST:Someone",
        "#LANGUAGE:English",
        "#YEAR:1999",
        "#MP3:Someone - Some Song.mp3",
        "#COVER:cover.jpg",
    )
    assert header.metadata.title == "Some Song"
    assert header.metadata.artist == "Someone"
    assert header.metadata.language == "English"
    assert header.metadata.year == "1999"
    assert header.metadata.audio == Path("songs/Someone - Some Song.mp3")
    assert header.metadata.cover == Path("songs/cover.jpg")


def test_that_keys_are_case_insensitive() -> None:
    header = parse("#title:Some Song", "#Artist:Someone")
    assert header.metadata.title == "Some Song"
    assert header.metadata.artist == "Someone"


def test_that_the_value_keeps_its_colons() -> None:
    header = parse("#TITLE:Re: Zero", "#ARTIST::Someone")
    assert header.metadata.title == "Re: Zero"
    assert header.metadata.artist == ":Someone"


def test_that_titles_lose_their_extra_colon() -> None:
    assert parse("#TITLE:: Some Song").metadata.title == "Some Song"


def test_that_unknown_and_empty_fields_are_ignored() -> None:
    header = parse("#MEDLEYSTARTBEAT:12", "#ENCODING:UTF8", "#GENRE:", "")
    assert header.metadata.genre is None


def test_timing_fields() -> None:
    header = parse("#BPM:300,5", "#GAP:1500", "#RELATIVE:YES")
    assert header.bpm == Decimal("300.5")
    assert header.gap == Fraction(3, 2)
    assert header.relative


def test_second_fields() -> None:
    header = parse("#START:12.5", "#VIDEOGAP:-0,25", "#PREVIEWSTART:45")
    assert header.metadata.start == Fraction(25, 2)
    assert header.metadata.video_gap == Fraction(-1, 4)
    assert header.metadata.preview_start == 45


def test_that_the_header_stops_at_the_first_note() -> None:
    header = HeaderParser()
    assert not header.parse_field(": 0 4 60 la")
    assert not header.parse_field("E")


def test_that_a_field_without_colon_is_a_format_error() -> None:
    with pytest.raises(FormatError, match="#key:value"):
        HeaderParser().parse_field("#TITLE Some Song")


@pytest.mark.parametrize("line", ["#BPM:fast", "#GAP:1O0", "#RELATIVE:maybe"])
def test_invalid_values(line: str) -> None:
    with pytest.raises(FormatError, match="Invalid #"):
        HeaderParser().parse_field(line)


@pytest.mark.parametrize("line", ["#BPM:0", "#BPM:0.5"])
def test_that_an_invalid_bpm_is_refused_by_the_tempo_map(line: str) -> None:
    header = parse(line)
    with pytest.raises(FormatError, match="Invalid #BPM value"):
        header.tempo_map()


@pytest.mark.parametrize(
    "lines",
    [[], ["#TITLE:Some Song"], ["#ARTIST:Someone"], ["#TITLE:", "#ARTIST:Someone"]],
)
def test_that_title_and_artist_are_required(lines: list) -> None:
    header = parse(*lines)
    with pytest.raises(EmptyTrackError, match="Required header fields missing"):
        header.raise_if_incomplete()


def test_tempo_map_from_the_header() -> None:
    header = parse("#BPM:120", "#GAP:1000")
    assert header.tempo_map().seconds_at(8) == 2


def test_that_no_bpm_gives_an_empty_tempo_map() -> None:
    header = parse("#GAP:1000")
    tempo_map = header.tempo_map()
    assert tempo_map.seconds_at(0) == 1
    with pytest.raises(ValueError):
        tempo_map.seconds_at(1)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("yes", True),
        ("True", True),
        ("1", True),
        ("NO", False),
        ("false", False),
        ("0", False),
    ],
)
def test_parse_bool(value: str, expected: bool) -> None:
    assert parse_bool(value) is expected
