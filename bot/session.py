"""
session.py — Accumulates one logo remix from Telegram conversation state.

Fields are filled step by step as the user answers the bot's questions,
then turned into a GenerationRequest when the user confirms.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from remixer.errors import MissingSourceImage
from remixer.models import PRESERVATION_LABELS, GenerationRequest, ImagePayload, PreservationSet

# Replies that mean "leave this optional field blank".
SKIP_WORDS = {"skip", "-", "no", "none", "n/a", "na", "pass", "nope"}


def clean_optional(text: Optional[str]) -> str:
    """Return the stripped reply, or "" if the user chose to skip."""
    value = (text or "").strip()
    # "/skip" or "/skip@SomeBot" arrives as the message text of the command
    word = value.lower().lstrip("/").split("@", 1)[0]
    if word in SKIP_WORDS:
        return ""
    return value


def _short(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


@dataclass
class RemixSession:
    """Everything collected for one remix."""

    logo: Optional[ImagePayload] = None
    brand_name: str = ""
    industry: str = ""
    change_instructions: str = ""
    preservation: PreservationSet = field(default_factory=PreservationSet)

    def is_ready(self) -> bool:
        return self.logo is not None

    def toggle(self, key: str) -> None:
        self.preservation = self.preservation.toggled(key)

    def preserve_options(self) -> List[tuple]:
        """(field, label, preserved) for every flag, in display order."""
        return [
            (key, label, getattr(self.preservation, key))
            for key, label in PRESERVATION_LABELS.items()
        ]

    def to_request(self) -> GenerationRequest:
        if self.logo is None:
            raise MissingSourceImage()
        return GenerationRequest(
            source_image=self.logo,
            brand_name=self.brand_name,
            industry=self.industry,
            change_instructions=self.change_instructions,
            preservation=self.preservation,
        )

    def summary_text(self) -> str:
        """Plain-text summary shown before the user confirms."""
        kept = ", ".join(self.preservation.labels()) or "nothing (creative freedom)"
        lines = [
            f"🏷 Brand: {self.brand_name or '(keep existing text)'}",
            f"🏭 Industry: {self.industry or '(not specified)'}",
            f"✏️ Changes: {_short(self.change_instructions, 120) if self.change_instructions else '(none)'}",
            f"🔒 Keep: {kept}",
        ]
        return "\n".join(lines)
