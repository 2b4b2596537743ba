"""Microphone input that keeps the latest frame for on-demand analysis."""

from __future__ import annotations
import threading
from typing import Any, ClassVar, Dict, List, Optional

import numpy as np
import sounddevice as sd

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.interfaces import IAudioInput

logger = get_logger(__name__)

COMMON_SAMPLE_RATES: List[int] = [44100, 48000, 22050, 16000, 8000]


class SoundDeviceInput(IAudioInput):
    """Audio input using the sounddevice library.

    The stream callback runs on the audio thread and only copies samples
    into a ring buffer; ``get_frame`` hands out a copy of the newest
    ``frame_size`` samples.
    """

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    FRAME_SIZE: ClassVar[int] = 2048  # Samples analyzed per poll
    BLOCK_SIZE: ClassVar[int] = 512  # Samples delivered per stream callback
    CHANNELS: ClassVar[int] = 1  # Mono audio

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        frame_size: Optional[int] = None,
        channels: Optional[int] = None,
        block_size: Optional[int] = None,
    ) -> None:
        """Initialize the audio input handler.

        Args:
            device_id: Audio input device ID, or None for the system default
            sample_rate: Preferred sample rate in Hz, or None for default (44100)
            frame_size: Samples per analysis frame, or None for default (2048)
            channels: Number of audio channels to open, or None for default (1)
            block_size: Samples per stream callback, or None for default (512)
        """
        self._device_id = device_id
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._frame_size = frame_size or self.FRAME_SIZE
        self._channels = channels or self.CHANNELS
        self._block_size = block_size or self.BLOCK_SIZE

        self._stream: Optional[sd.InputStream] = None
        self._running = False
        self._lock = threading.Lock()
        self._buffer = np.zeros(self._frame_size, dtype=np.float32)
        self._filled = 0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_size(self) -> int:
        return self._frame_size

    def is_running(self) -> bool:
        return self._running

    def _candidate_rates(self) -> List[int]:
        rates = [self._sample_rate]
        rates.extend(rate for rate in COMMON_SAMPLE_RATES if rate != self._sample_rate)
        return rates

    def start(self) -> bool:
        """Open and start the input stream.

        The preferred sample rate is tried first, then the common rates.

        Returns:
            True if the stream is running, False if no rate could be opened
        """
        if self._running:
            logger.debug("Audio input already running")
            return True

        self._clear_buffer()

        for rate in self._candidate_rates():
            stream = None
            try:
                logger.info(f"Trying to start audio input with sample rate: {rate} Hz")
                stream = sd.InputStream(
                    device=self._device_id,
                    samplerate=rate,
                    blocksize=self._block_size,
                    channels=self._channels,
                    dtype="float32",
                    callback=self._audio_callback,
                )
                stream.start()
            except (sd.PortAudioError, OSError, ValueError) as e:
                logger.warning(f"Failed to start audio input at {rate} Hz: {e}")
                if stream is not None:
                    try:
                        stream.close()
                    except sd.PortAudioError as close_error:
                        logger.debug(f"Error closing failed stream: {close_error}")
                continue

            self._stream = stream
            self._sample_rate = rate
            self._running = True
            logger.info(f"Audio input started with sample rate {rate} Hz")
            return True

        logger.error("Could not start audio input with any sample rate")
        return False

    def stop(self) -> None:
        """Stop capturing audio."""
        if not self._running and self._stream is None:
            return

        stream, self._stream = self._stream, None
        self._running = False
        try:
            if stream is not None:
                stream.stop()
                stream.close()
            logger.info("Audio input stopped")
        except sd.PortAudioError as e:
            logger.error(f"Error stopping audio input: {e}")
        finally:
            self._clear_buffer()

    def get_frame(self) -> Optional[AudioFrame]:
        """Return a copy of the newest frame once enough audio has arrived."""
        if not self._running:
            return None
        with self._lock:
            if self._filled < self._frame_size:
                return None
            samples = self._buffer.copy()
        return AudioFrame(samples=samples, sample_rate=self._sample_rate)

    def _clear_buffer(self) -> None:
        with self._lock:
            self._buffer[:] = 0.0
            self._filled = 0

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info: Any,
        status: sd.CallbackFlags,
    ) -> None:
        """Copy incoming samples into the ring buffer.

        Called from the audio thread, so it must stay fast and non-blocking
        apart from the short buffer lock.
        """
        if status:
            logger.warning(f"Audio callback status: {status}")

        # Extract mono audio data (take first channel if multi-channel)
        data = indata[:, 0] if indata.ndim > 1 else indata
        self._append(data)

    def _append(self, data: np.ndarray) -> None:
        size = self._frame_size
        count = len(data)
        if count == 0:
            return
        with self._lock:
            if count >= size:
                self._buffer[:] = data[-size:]
            else:
                self._buffer[:-count] = self._buffer[count:]
                self._buffer[-count:] = data
            self._filled = min(size, self._filled + count)


def describe_input_devices(
    rates: Optional[List[int]] = None,
) -> List[Dict[str, Any]]:
    """List input-capable devices with the sample rates each one accepts.

    Returns:
        One dict per input device with 'id', 'name', 'max_input_channels',
        'default_samplerate' and 'supported_rates'
    """
    rates = rates or [8000, 16000, 22050, 44100, 48000, 96000]
    devices = []
    for device_id, device in enumerate(sd.query_devices()):
        if device["max_input_channels"] <= 0:
            continue
        supported = []
        for rate in rates:
            try:
                sd.check_input_settings(device=device_id, samplerate=rate, channels=1)
                supported.append(rate)
            except (sd.PortAudioError, ValueError) as e:
                logger.debug(f"Device {device_id} rejects {rate} Hz: {e}")
        devices.append(
            {
                "id": device_id,
                "name": device["name"],
                "max_input_channels": device["max_input_channels"],
                "default_samplerate": device["default_samplerate"],
                "supported_rates": supported,
            }
        )
    return devices
