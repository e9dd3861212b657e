"""
Errors raised by the logo remixer.

  RemixerError
    MissingSourceImage      — no logo was supplied (caught before any network call)
    InvalidPreservationSet  — unknown or non-boolean preservation flag
    GenerationFailure       — anything that went wrong inside a generation call
      ServiceCallFailed     — the Gemini request itself raised
      NoImageReturned       — Gemini answered but sent no inline image
      GenerationCancelled   — the caller's cancel event fired mid-request
"""

from __future__ import annotations

from typing import Optional


class RemixerError(Exception):
    """Base class for every error the remixer surfaces to a caller."""


class MissingSourceImage(RemixerError, ValueError):
    def __init__(self, message: str = "Please upload a logo to get started.") -> None:
        super().__init__(message)


class InvalidPreservationSet(RemixerError, ValueError):
    pass


class GenerationFailure(RemixerError):
    pass


class ServiceCallFailed(GenerationFailure):
    """The Gemini call raised (auth, quota, bad request, server error...)."""

    def __init__(self, original: BaseException) -> None:
        self.original: Optional[BaseException] = original
        super().__init__(f"Failed to generate image. {original}")


class NoImageReturned(GenerationFailure):
    def __init__(self, message: str = "No image data found in the Gemini API response.") -> None:
        super().__init__(message)


class GenerationCancelled(GenerationFailure):
    def __init__(self, message: str = "Logo generation was cancelled.") -> None:
        super().__init__(message)
