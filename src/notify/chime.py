"""Synthesized completion chime and sounddevice playback."""

import logging
from typing import Optional

import numpy as np

from .errors import NotificationError


def synthesize_chime(
    sample_rate_hz: int = 22050,
    *,
    tones_hz: tuple[float, ...] = (880.0, 1320.0),
    tone_seconds: float = 0.18,
    volume: float = 0.4,
) -> np.ndarray:
    """Return a mono float32 buffer of short sine tones with a soft fade."""
    if sample_rate_hz <= 0:
        raise ValueError("sample_rate_hz must be positive")
    samples_per_tone = max(1, int(sample_rate_hz * tone_seconds))
    t = np.arange(samples_per_tone, dtype=np.float32) / sample_rate_hz
    envelope = np.linspace(1.0, 0.0, samples_per_tone, dtype=np.float32)
    tones = [
        (volume * np.sin(2 * np.pi * freq * t) * envelope).astype(np.float32)
        for freq in tones_hz
    ]
    return np.concatenate(tones) if tones else np.zeros(0, dtype=np.float32)


class SoundDeviceChimeOutput:
    """Plays mono PCM arrays through a selected sounddevice output."""
    def __init__(
        self,
        output_device_index: Optional[int] = None,
        blocksize: int = 1024,
        logger: Optional[logging.Logger] = None,
    ):
        self._output_device_index = output_device_index
        self._blocksize = blocksize
        self._logger = logger or logging.getLogger(__name__)

    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        if wav.ndim != 1:
            raise NotificationError("Expected mono PCM array for playback")
        if len(wav) == 0:
            raise NotificationError("Cannot play empty audio buffer")

        try:
            # PortAudio is loaded on import; headless hosts may not have it.
            import sounddevice as sd
        except (ImportError, OSError) as error:
            raise NotificationError(f"Audio output unavailable: {error}") from error

        pos = 0

        def callback(outdata, frames, time_info, status):
            nonlocal pos
            if status:
                self._logger.warning("Sounddevice status: %s", status)

            end = pos + frames
            chunk = wav[pos:end]

            if len(chunk) < frames:
                outdata[: len(chunk), 0] = chunk
                outdata[len(chunk) :, 0] = 0
                raise sd.CallbackStop()

            outdata[:, 0] = chunk
            pos = end

        try:
            with sd.OutputStream(
                channels=1,
                samplerate=sample_rate_hz,
                blocksize=self._blocksize,
                callback=callback,
                device=self._output_device_index,
            ):
                sd.sleep(int(len(wav) / sample_rate_hz * 1000) + 100)
        except Exception as error:
            raise NotificationError(f"Chime playback failed: {error}") from error
