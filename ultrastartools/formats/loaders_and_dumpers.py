from typing import Dict

from . import timeline, ultrastar
from .enum import Format
from .typing import Dumper, Loader

LOADERS: Dict[Format, Loader] = {
    Format.ULTRASTAR: ultrastar.load_ultrastar,
}

DUMPERS: Dict[Format, Dumper] = {
    Format.TIMELINE: timeline.dump_timeline,
}
