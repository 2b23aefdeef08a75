"""UltraStar .txt files are the de facto standard for karaoke games charts

They start with a #KEY:VALUE header followed by one line per note, ticks
are converted to seconds using the BPM changes found along the way.
Authoring tools are not always careful so overlapping notes are common,
they get fixed on the fly when possible (see assembler.py)
"""

from .commons import EmptyTrackError, FormatError, OverlapWarning, SongParserError
from .load import load_ultrastar
