from enum import Enum


class Format(str, Enum):
    ULTRASTAR = "ultrastar"
    TIMELINE = "timeline"
