from pathlib import Path
from typing import Any, Dict, Protocol

from ultrastartools.song import Song


class Loader(Protocol):
    """Reads a chart (a file, or a folder holding one) into a Song. Format
    specific settings like the text encoding come in as keyword arguments"""

    def __call__(self, path: Path, **kwargs: Any) -> Song:
        ...


class Dumper(Protocol):
    """Turns a Song into files. The path is either the file to write or the
    folder to write into, the result maps each chosen file path to its
    contents, nothing gets written to disk at this point"""

    def __call__(self, song: Song, path: Path, **kwargs: Any) -> Dict[Path, bytes]:
        ...
