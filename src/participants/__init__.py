"""
Participants Package - Concrete reconciliation participants.

- BaseParticipant: retrying ask() flow over an abstract generate()
- InferenceParticipant: generate() through an OpenAI-compatible service
"""

from src.participants.base import BaseParticipant
from src.participants.inference_participant import InferenceParticipant


__all__ = [
    "BaseParticipant",
    "InferenceParticipant",
]
