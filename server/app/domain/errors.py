from __future__ import annotations
"""server/app/domain/errors.py
~~~~~~~~~~~~~~~~~~~~~~~~
Erreurs métier du pipeline de télémétrie.

Chaque erreur porte le code HTTP qui lui correspond ; le mapping est fait
une seule fois par les exception handlers (app.core.middleware).
"""

from typing import Any


class TelemetryError(Exception):
    """Base des erreurs du pipeline."""
    status_code: int = 500

    def __init__(self, message: str = "", **context: Any):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.context = context


class InvalidPayload(TelemetryError):
    """Payload device invalide : rien n'est écrit."""
    status_code = 400

    def __init__(self, message: str = "Invalid input data", errors: list[dict] | None = None, **context: Any):
        super().__init__(message, **context)
        self.errors = errors or []


class InvalidInput(TelemetryError):
    """Entrée inexploitable par l'analyseur (segment vide, valeur non finie...)."""
    status_code = 422


class InsufficientSignal(TelemetryError):
    """Pas assez de pics R pour estimer un rythme (rythme inconnu, pas zéro)."""
    status_code = 422


class NotFound(TelemetryError):
    status_code = 404


class StoreUnavailable(TelemetryError):
    """Échec d'une étape de persistance."""
    status_code = 500
