"""Audio port — abstract interface for playing the reminder chime.

Playback is best-effort: callers treat any exception as non-fatal.
"""

from __future__ import annotations

from typing import Protocol


class AudioPort(Protocol):
    """Abstract audio playback interface used by core modules."""

    def play(self, resource: str, volume: float) -> bool: ...
