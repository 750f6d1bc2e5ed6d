"""Domain models for the context hub."""

from .models import Capture, CaptureType, ScoredCapture, AnswerResult

__all__ = ["Capture", "CaptureType", "ScoredCapture", "AnswerResult"]
