"""A JSON dump of the notes once placed on the timeline, meant for tools
that want clock times instead of ticks. Times are in seconds, rounded to the
microsecond"""

from .dump import dump_timeline
