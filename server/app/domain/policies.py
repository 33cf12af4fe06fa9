# server/app/domain/policies.py

from __future__ import annotations
"""
Règles métier utilisées pour décider d'une alerte.

Fonction principale :
    evaluate_alert(temperature_c, heart_rate_bpm)
Alerte si température trop haute ET rythme cardiaque anormal (conjonction :
les deux conditions doivent être vraies en même temps).
"""

TEMPERATURE_ALERT_C = 37.5
HEART_RATE_LOW_BPM = 60
HEART_RATE_HIGH_BPM = 100

ALERT_REASON = "ecg_and_temp_alert"
NORMAL_REASON = "normal"


def temperature_too_high(temperature_c: float) -> bool:
    return temperature_c > TEMPERATURE_ALERT_C


def heart_rate_abnormal(heart_rate_bpm: int) -> bool:
    return heart_rate_bpm < HEART_RATE_LOW_BPM or heart_rate_bpm > HEART_RATE_HIGH_BPM


def evaluate_alert(temperature_c: float, heart_rate_bpm: int) -> bool:
    """
    - temperature_c > 37.5
    - heart_rate_bpm < 60 ou > 100
    Alerte = les deux à la fois.
    """
    return temperature_too_high(temperature_c) and heart_rate_abnormal(heart_rate_bpm)


def alert_reason(alert: bool) -> str:
    return ALERT_REASON if alert else NORMAL_REASON


def buzzer_command(alert: bool) -> str:
    """Commande buzzer ("on"/"off") reflétant l'état d'alerte courant."""
    return "on" if alert else "off"
