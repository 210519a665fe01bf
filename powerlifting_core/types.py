"""Type definitions for backend records and cached UI pointers."""
from __future__ import annotations

from typing import Optional, TypedDict


class ParticipantPayload(TypedDict, total=False):
    """A participant as returned by the participants endpoint."""
    id: int
    nombre: str
    apellido: str
    peso: Optional[float]  # Body weight (kg)
    altura: Optional[float]
    edad: Optional[int]
    competenciaId: int

    # Per-discipline opt-in flags
    participaSentadilla: bool
    participaBanca: bool
    participaMuerto: bool


class LiftPlanPayload(TypedDict, total=False):
    """
    A lift plan (levantamiento) as returned by the backend.

    One per (participant, lift type); three planned weights.
    """
    id: str
    participanteId: int
    tipo: str  # 'SENTADILLA' | 'BANCA' | 'MUERTO'
    peso1: float
    peso2: float
    peso3: float


class AttemptPayload(TypedDict, total=False):
    """A recorded attempt (intento) as returned by the backend."""
    id: int
    participanteId: int
    tipo: str  # 'SENTADILLA' | 'BANCA' | 'MUERTO'
    numero: int  # 1..3
    peso: float
    resultado: str  # 'PENDIENTE' | 'EXITO' | 'FALLO'


class CachedTurnPointer(TypedDict, total=False):
    """
    Client-side cached position (browser storage).

    Only ever a hint: resume_turn() revalidates it against a fresh derivation.
    """
    lift: str  # 'squat' | 'bench' | 'deadlift'
    round: int
    lifterId: str
    finished: bool
