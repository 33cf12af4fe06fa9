from __future__ import annotations
"""
server/app/application/services/vital_signs_service.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Estimation du rythme cardiaque (BPM) à partir d'un segment ECG brut.

Méthode :
    1) ligne de base = médiane du segment, on travaille sur le signal centré
    2) seuil adaptatif = ratio x amplitude max du segment centré
    3) pics R = maxima locaux au-dessus du seuil, séparés d'au moins une
       période réfractaire (intervalle du rythme max plausible)
    4) distances inter-pics (en échantillons) -> secondes via la fréquence
       d'échantillonnage -> rythmes instantanés -> moyenne -> arrondi

Déterministe : même segment + même fréquence => même BPM.
"""

import logging
from typing import Sequence

import numpy as np
from scipy.signal import find_peaks

from app.core.config import settings
from app.domain.errors import InsufficientSignal, InvalidInput

logger = logging.getLogger(__name__)


class VitalSignAnalyzer:
    def __init__(
        self,
        *,
        sampling_rate_hz: float = 250.0,
        threshold_ratio: float = 0.6,
        min_bpm: int = 30,
        max_bpm: int = 220,
    ):
        if sampling_rate_hz <= 0:
            raise ValueError("sampling_rate_hz must be > 0")
        if not 0 < threshold_ratio <= 1:
            raise ValueError("threshold_ratio must be in (0, 1]")
        self.sampling_rate_hz = float(sampling_rate_hz)
        self.threshold_ratio = float(threshold_ratio)
        self.min_bpm = int(min_bpm)
        self.max_bpm = int(max_bpm)

    @classmethod
    def from_settings(cls) -> "VitalSignAnalyzer":
        return cls(
            sampling_rate_hz=settings.ECG_SAMPLING_RATE_HZ,
            threshold_ratio=settings.ECG_PEAK_THRESHOLD_RATIO,
            min_bpm=settings.HEART_RATE_MIN_BPM,
            max_bpm=settings.HEART_RATE_MAX_BPM,
        )

    def _as_signal(self, ecg: Sequence[float]) -> np.ndarray:
        if ecg is None or len(ecg) == 0:
            raise InvalidInput("empty ECG segment")
        try:
            x = np.asarray(ecg, dtype=float)
        except (TypeError, ValueError) as exc:
            raise InvalidInput("ECG segment must contain numbers only") from exc
        if x.ndim != 1:
            raise InvalidInput("ECG segment must be one-dimensional")
        if not np.all(np.isfinite(x)):
            raise InvalidInput("ECG segment contains non-finite values")
        return x

    def detect_r_peaks(self, ecg: Sequence[float], sampling_rate_hz: float | None = None) -> np.ndarray:
        """Indices (triés) des pics R détectés dans le segment."""
        fs = self._rate(sampling_rate_hz)
        x = self._as_signal(ecg)

        centered = x - np.median(x)
        amplitude = float(centered.max())
        if amplitude <= 0.0:
            # segment plat (ou uniquement négatif) : aucun complexe exploitable
            return np.array([], dtype=int)

        height = self.threshold_ratio * amplitude
        refractory = max(1, int(fs * 60.0 / self.max_bpm))
        peaks, _ = find_peaks(centered, height=height, distance=refractory)
        return peaks

    def estimate_heart_rate(self, ecg: Sequence[float], sampling_rate_hz: float | None = None) -> int:
        """
        Retourne le rythme cardiaque moyen (BPM entier).

        Raises:
            InvalidInput: segment vide / valeurs non finies / fréquence <= 0
            InsufficientSignal: moins de deux pics R, ou rythme hors plage plausible
        """
        fs = self._rate(sampling_rate_hz)
        peaks = self.detect_r_peaks(ecg, fs)
        if len(peaks) < 2:
            raise InsufficientSignal("fewer than two R-peaks detected", peaks=len(peaks))

        intervals_s = np.diff(peaks) / fs
        rates = 60.0 / intervals_s
        bpm = int(round(float(np.mean(rates))))

        if bpm < self.min_bpm or bpm > self.max_bpm:
            raise InsufficientSignal(
                f"heart rate {bpm} bpm outside plausible range [{self.min_bpm}, {self.max_bpm}]",
                bpm=bpm,
            )
        logger.debug("ecg.analyzed", extra={"peaks": int(len(peaks)), "bpm": bpm, "fs": fs})
        return bpm

    def _rate(self, sampling_rate_hz: float | None) -> float:
        fs = self.sampling_rate_hz if sampling_rate_hz is None else float(sampling_rate_hz)
        if not np.isfinite(fs) or fs <= 0:
            raise InvalidInput("sampling rate must be a positive number")
        return fs
