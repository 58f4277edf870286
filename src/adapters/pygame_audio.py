"""Pygame audio adapter — implements AudioPort with pygame.mixer.

Playback is non-blocking: mixer.music.play() returns immediately while
the chime plays in the background.
"""

from __future__ import annotations

import logging

import pygame

logger = logging.getLogger(__name__)


class PygameAudioPlayer:
    """pygame.mixer implementation of AudioPort."""

    def __init__(self) -> None:
        self._mixer_ready = False

    def _ensure_mixer(self) -> None:
        if not self._mixer_ready:
            pygame.mixer.init()
            self._mixer_ready = True
            logger.debug("pygame mixer initialized")

    def play(self, resource: str, volume: float) -> bool:
        """Start playing the sound file. Raises pygame.error on failure."""
        self._ensure_mixer()
        pygame.mixer.music.load(resource)
        pygame.mixer.music.set_volume(volume)
        pygame.mixer.music.play()
        return True
