"""harmonylab: real-time music-theory labels for a set of sounding notes."""

__version__ = "0.1.0"
