from itertools import count
from pathlib import Path
from typing import Dict, Iterator

from ultrastartools import song as ust
from ultrastartools.utils import none_or


class FileNameFormat:
    """Picks the path of an output file. When the suggestion is a folder the
    file name comes from the template filled with the song's metadata,
    otherwise the suggestion itself is used. Names already taken on disk get
    a -1, -2 ... suffix"""

    def __init__(self, template: str, suggestion: Path):
        self.template = template
        self.suggestion = suggestion

    def available_filename_for(self, song: ust.Song) -> Path:
        return next(p for p in self.iter_deduped_paths(song) if not p.exists())

    def iter_deduped_paths(self, song: ust.Song) -> Iterator[Path]:
        if self.suggestion.is_dir():
            folder = self.suggestion
            name = Path(self.template.format(**format_params(song.metadata)))
        else:
            folder = self.suggestion.parent
            name = Path(self.suggestion.name)

        for dedup_index in count(start=0):
            dedup = "" if dedup_index == 0 else f"-{dedup_index}"
            yield folder / f"{name.stem}{dedup}{name.suffix}"


def format_params(metadata: ust.Metadata) -> Dict[str, str]:
    return {
        "title": none_or(slugify, metadata.title) or "untitled",
        "artist": none_or(slugify, metadata.artist) or "unknown",
    }


SLASHES = str.maketrans({"/": "", "\\": ""})


def slugify(s: str) -> str:
    return s.translate(SLASHES).strip()
