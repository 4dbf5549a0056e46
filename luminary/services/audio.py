"""Amplitude/frequency signal consumed by the sound reactive show.

Audio capture lives outside the engine. Capture code pushes sample buffers
into a ``BufferLevelMeter`` (or provides any other ``LevelSource``) and the
show polls it.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

RMS_GAIN = 10.0


class AudioLevel(BaseModel):
    model_config = ConfigDict(frozen=True)

    amplitude: float = Field(default=0.0, ge=0.0, le=1.0)
    frequency: float = Field(default=0.0, ge=0.0, le=1.0)  # normalized zero-crossing rate


class LevelSource(Protocol):
    async def read(self) -> Optional[AudioLevel]: ...


class ConstantLevelSource:
    """Always reports the same level. Handy for demos and tests."""

    def __init__(self, amplitude: float = 0.0, frequency: float = 0.0):
        self.level = AudioLevel(amplitude=amplitude, frequency=frequency)

    async def read(self) -> Optional[AudioLevel]:
        return self.level


class BufferLevelMeter:
    """Keeps the level of the most recently pushed sample buffer.

    Buffers are float samples, either mono ``(frames,)`` or
    ``(frames, channels)``; only the first channel is analyzed.
    """

    def __init__(self):
        self._level: Optional[AudioLevel] = None

    @staticmethod
    def analyze(samples: np.ndarray) -> Optional[AudioLevel]:
        data = np.nan_to_num(np.asarray(samples, dtype=np.float64))
        if data.ndim > 1:
            data = data[:, 0]
        if data.size == 0:
            return None

        rms = float(np.sqrt(np.mean(np.square(data))))
        amplitude = min(rms * RMS_GAIN, 1.0)

        # Rough frequency estimate: sign changes per sample.
        negative = data < 0
        crossings = int(np.count_nonzero(negative[1:] != negative[:-1]))
        frequency = crossings / data.size

        return AudioLevel(amplitude=amplitude, frequency=frequency)

    def push(self, samples: np.ndarray) -> Optional[AudioLevel]:
        level = self.analyze(samples)
        if level is None:
            logger.debug("Ignoring empty audio buffer")
            return None
        self._level = level
        return level

    def reset(self) -> None:
        self._level = None

    async def read(self) -> Optional[AudioLevel]:
        return self._level
