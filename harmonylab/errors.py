"""Exception types raised by the analysis engine."""


class HarmonyLabError(Exception):
    """Base class for all harmonylab errors."""


class InvalidArgument(HarmonyLabError, ValueError):
    """
    A caller passed something the engine cannot work with.

    Raised for unknown clefs, wrong note counts, out-of-range note numbers,
    unknown key names and unknown configuration keys. Never retried.
    """


class KeySignatureError(HarmonyLabError):
    """A key signature is incomplete or internally inconsistent."""
