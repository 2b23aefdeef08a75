from pathlib import Path

from .enum import Format
from .load_tools import decode_text
from .ultrastar.commons import looks_like_ultrastar


def guess_format(path: Path) -> Format:
    if path.is_dir():
        raise ValueError("Can't guess chart format for a folder")

    if looks_like_ultrastar_file(path):
        return Format.ULTRASTAR

    raise ValueError("Unrecognized file format")


def looks_like_ultrastar_file(path: Path) -> bool:
    with path.open("rb") as f:
        start = f.read(16)

    return looks_like_ultrastar(decode_text(start))
