"""Error taxonomy for triadvoice.

Every error a user can trigger with bad input derives from
:class:`TriadVoiceError`, so the generation entry point can turn any of them
into a single readable message.
"""


class TriadVoiceError(ValueError):
    """Base class for all user-facing triadvoice errors."""


class ChordParseError(TriadVoiceError):
    """A chord token, slash bass, note query or progression could not be parsed."""


class RangeError(TriadVoiceError):
    """Register bounds are unparseable or do not describe a usable range."""


class VoicingModeError(TriadVoiceError):
    """An unknown voicing mode was requested."""


class ExportError(TriadVoiceError):
    """MIDI export was requested without a generated sequence."""
