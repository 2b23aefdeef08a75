from pathlib import Path
from typing import Callable, Dict, Optional, TypeVar

T = TypeVar("T")


def make_folder_loader(
    glob_pattern: str, file_loader: Callable[[Path], Optional[T]]
) -> Callable[[Path], Dict[Path, T]]:
    """The returned function reads either the given file or every file
    matching the pattern in the given folder. Files the file loader gives
    None for are left out"""

    def folder_loader(path: Path) -> Dict[Path, T]:
        paths = sorted(path.glob(glob_pattern)) if path.is_dir() else [path]
        loaded = ((p, file_loader(p)) for p in paths)
        return {p: contents for p, contents in loaded if contents is not None}

    return folder_loader


def decode_text(raw: bytes, encoding: Optional[str] = None) -> str:
    """Use the given encoding if any, otherwise UTF-8 (with or without BOM),
    and latin-1 as a last resort since it never fails"""
    if encoding is not None:
        return raw.decode(encoding)

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")
