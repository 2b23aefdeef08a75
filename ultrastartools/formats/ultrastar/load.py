from functools import partial
from pathlib import Path
from typing import Any, Iterable, List, Optional

from more_itertools import peekable

from ultrastartools import song
from ultrastartools.formats.load_tools import decode_text, make_folder_loader

from .assembler import VocalTrackAssembler
from .commons import SongParserError, looks_like_ultrastar
from .decoder import parse_line
from .header import HeaderParser


def load_ultrastar(
    path: Path, *, encoding: Optional[str] = None, **kwargs: Any
) -> song.Song:
    load_folder = make_folder_loader("*.txt", partial(load_file, encoding=encoding))
    files = load_folder(path)
    if not files:
        raise ValueError(f"No UltraStar file found at {path}")

    if len(files) > 1:
        raise ValueError(
            "Multiple UltraStar files were found in the given folder, "
            "load them one by one"
        )

    ((file_path, lines),) = files.items()
    return load_lines(lines, file_path)


def load_file(path: Path, encoding: Optional[str] = None) -> Optional[List[str]]:
    text = decode_text(path.read_bytes(), encoding)
    if not looks_like_ultrastar(text):
        return None

    return text.lstrip("\ufeff").splitlines()


def load_lines(lines: Iterable[str], path: Optional[Path] = None) -> song.Song:
    folder = path.parent if path is not None else None
    header = HeaderParser(folder)
    numbered_lines = peekable(enumerate(lines, start=1))
    try:
        header_end = load_header(header, numbered_lines)
    except SongParserError as e:
        raise e.at(path=path) from e

    # Errors about the header as a whole point at the line right after it
    first_note_line, _ = numbered_lines.peek((header_end or None, ""))
    try:
        header.raise_if_incomplete()
        session = header.decoding_session()
    except SongParserError as e:
        raise e.at(line=first_note_line, path=path) from e

    assembler = VocalTrackAssembler(path=path)
    line_number = header_end
    for line_number, line in numbered_lines:
        try:
            candidate = session.decode(
                parse_line(line), track_is_empty=assembler.is_empty
            )
            if candidate is not None:
                assembler.add(candidate)
        except SongParserError as e:
            raise e.at(line=line_number, path=path) from e

        if session.ended:
            break

    try:
        track = assembler.finish()
    except SongParserError as e:
        raise e.at(line=line_number or None, path=path) from e

    return song.Song(
        metadata=header.metadata,
        tracks={track.name: track},
        timing=session.tempo_map.convert_to_timing_info(),
        has_corrected_tracks=assembler.has_corrections,
    )


def load_header(header: HeaderParser, numbered_lines: peekable) -> int:
    """Consume header lines, stops right before the first line of notes.
    Returns the number of the last header line, 0 if there is none"""
    last_line = 0
    while numbered_lines:
        line_number, line = numbered_lines.peek()
        try:
            in_header = header.parse_field(line)
        except SongParserError as e:
            raise e.at(line=line_number) from e

        if not in_header:
            break

        next(numbered_lines)
        last_line = line_number

    return last_line
