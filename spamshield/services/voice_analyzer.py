# spamshield/services/voice_analyzer.py
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import numpy as np
import soundfile as sf

FEATURE_NAMES = ("Natural Pauses", "Voice Variation", "Background Noise", "Speech Patterns")


class AudioTooLongError(ValueError):
    pass


@dataclass
class VoiceAnalyzerConfig:
    frame_ms: float = 25.0
    hop_ms: float = 10.0

    min_seconds: float = 1.0
    max_seconds: float = 120.0

    # silence threshold = floor + ratio * (speech - floor)
    silence_ratio: float = 0.1
    floor_percentile: float = 10.0
    speech_percentile: float = 90.0
    # below this floor-to-speech range the signal has no real pauses
    min_dynamic_range_db: float = 6.0

    # human speech pauses roughly a quarter of the time
    target_pause_ratio: float = 0.25
    cv_scale: float = 0.5

    # pause-frame loudness mapped linearly to 0..100
    noise_db_low: float = -90.0
    noise_db_high: float = -40.0


class VoiceAnalyzer:
    """
    Tells a synthetic (bot) voice from a human one with four signal features.
    Each feature is 0..100, higher means more human-like:
      - Natural Pauses: how close the pause ratio is to natural speech
      - Voice Variation: loudness variation while speaking
      - Background Noise: room noise in the pauses (TTS output is often digitally silent)
      - Speech Patterns: irregularity of the spoken segment lengths
    """

    def __init__(self, cfg: VoiceAnalyzerConfig | None = None):
        self.cfg = cfg or VoiceAnalyzerConfig()

    def _check_duration(self, duration: float) -> None:
        if duration > self.cfg.max_seconds:
            raise AudioTooLongError(
                f"Audio too long: {duration:.2f}s (max {self.cfg.max_seconds:.1f}s)"
            )

    def load_audio(self, data: bytes) -> Tuple[np.ndarray, int]:
        if not data:
            raise ValueError("Empty audio")
        try:
            with sf.SoundFile(io.BytesIO(data)) as f:
                sr = int(f.samplerate)
                # length from the header, before anything is decoded
                self._check_duration(f.frames / float(sr) if sr > 0 else 0.0)
                # soundfile: (T, C)
                audio = f.read(dtype="float32", always_2d=True)
        except (RuntimeError, TypeError) as e:
            raise ValueError(f"Unsupported or corrupt audio: {e}") from e
        return audio.mean(axis=1), sr

    def analyze_bytes(self, data: bytes) -> Dict[str, Any]:
        samples, sr = self.load_audio(data)
        return self.analyze(samples, sr)

    def _frame_rms(self, samples: np.ndarray, sr: int) -> np.ndarray:
        frame = max(1, int(sr * self.cfg.frame_ms / 1000.0))
        hop = max(1, int(sr * self.cfg.hop_ms / 1000.0))
        if samples.size < frame:
            samples = np.pad(samples, (0, frame - samples.size))

        n_frames = 1 + (samples.size - frame) // hop
        # frame energy as differences of a running sum
        energy = np.concatenate(([0.0], np.cumsum(samples.astype(np.float64) ** 2)))
        starts = hop * np.arange(n_frames)
        sums = energy[starts + frame] - energy[starts]
        return np.sqrt(np.maximum(sums, 0.0) / frame)

    @staticmethod
    def _runs(mask: np.ndarray) -> List[int]:
        # lengths of consecutive True runs
        runs: List[int] = []
        current = 0
        for v in mask.tolist():
            if v:
                current += 1
            elif current:
                runs.append(current)
                current = 0
        if current:
            runs.append(current)
        return runs

    @staticmethod
    def _cv(values: np.ndarray) -> float:
        mean = float(np.mean(values)) if values.size else 0.0
        if mean <= 0:
            return 0.0
        return float(np.std(values) / mean)

    def features(self, samples: np.ndarray, sr: int) -> Dict[str, float]:
        cfg = self.cfg
        rms = self._frame_rms(samples, sr)

        floor = float(np.percentile(rms, cfg.floor_percentile))
        speech = float(np.percentile(rms, cfg.speech_percentile))
        threshold = floor + cfg.silence_ratio * (speech - floor)

        if floor > 0 and 20.0 * np.log10(max(speech, floor) / floor) < cfg.min_dynamic_range_db:
            paused = np.zeros(rms.shape, dtype=bool)
        else:
            paused = rms < threshold
        voiced = ~paused
        pause_ratio = float(np.mean(paused))

        natural_pauses = 1.0 - min(1.0, abs(pause_ratio - cfg.target_pause_ratio) / cfg.target_pause_ratio)

        voice_variation = min(1.0, self._cv(rms[voiced]) / cfg.cv_scale) if voiced.any() else 0.0

        if paused.any():
            pause_rms = float(np.mean(rms[paused]))
            if pause_rms > 0:
                noise_db = 20.0 * np.log10(pause_rms)
                span = cfg.noise_db_high - cfg.noise_db_low
                background_noise = float(np.clip((noise_db - cfg.noise_db_low) / span, 0.0, 1.0))
            else:
                background_noise = 0.0
        else:
            background_noise = 0.0

        runs = self._runs(voiced)
        if len(runs) >= 2:
            speech_patterns = min(1.0, self._cv(np.asarray(runs, dtype=np.float64)) / cfg.cv_scale)
        else:
            speech_patterns = 0.0

        values = (natural_pauses, voice_variation, background_noise, speech_patterns)
        return {name: round(float(100.0 * v), 2) for name, v in zip(FEATURE_NAMES, values)}

    def analyze(self, samples: np.ndarray, sr: int) -> Dict[str, Any]:
        samples = np.asarray(samples, dtype=np.float32)
        if samples.ndim > 1:
            samples = samples.mean(axis=1)
        if sr <= 0 or samples.size == 0:
            raise ValueError("Empty audio")

        duration = samples.size / float(sr)
        if duration < self.cfg.min_seconds:
            raise ValueError(
                f"Audio too short: {duration:.2f}s (need at least {self.cfg.min_seconds:.1f}s)"
            )
        self._check_duration(duration)

        feats = self.features(samples, sr)
        human_score = sum(feats.values()) / (100.0 * len(feats))

        return {
            "is_bot": bool(human_score < 0.5),
            "confidence": round(float(50.0 + 100.0 * abs(human_score - 0.5)), 2),
            "duration_sec": round(duration, 3),
            "features": [{"name": name, "value": value} for name, value in feats.items()],
        }
