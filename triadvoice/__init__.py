"""triadvoice: chord progressions to voiced triads and MIDI."""

__version__ = "0.1.0"
