"""
Data model for a single logo remix.

  ImagePayload       — the uploaded logo (raw bytes + media type)
  PreservationSet    — which visual attributes of the original to keep
  GenerationRequest  — everything one generation call needs
  GenerationResult   — exactly one of image bytes / failure
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import GenerationFailure, InvalidPreservationSet, MissingSourceImage


# ── Source image ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    mime_type: str = "image/png"

    def __post_init__(self) -> None:
        if not self.data:
            raise MissingSourceImage()
        if not self.mime_type or not self.mime_type.startswith("image/"):
            raise ValueError(f"Not an image media type: {self.mime_type!r}")

    @classmethod
    def from_base64(cls, b64_data: str, mime_type: str) -> "ImagePayload":
        try:
            data = base64.b64decode(b64_data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"Invalid base64 image data: {exc}") from exc
        return cls(data=data, mime_type=mime_type)

    @classmethod
    def from_data_url(cls, url: str) -> "ImagePayload":
        """Parse a browser-style ``data:image/png;base64,....`` URL."""
        head, sep, payload = url.partition(",")
        if not sep or not head or not payload:
            raise ValueError("Invalid file format")
        mime_type = head.split(":", 1)[1].split(";", 1)[0] if ":" in head else ""
        if not mime_type:
            raise ValueError("Could not determine mime type")
        return cls.from_base64(payload, mime_type)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def __repr__(self) -> str:
        return f"ImagePayload(mime_type={self.mime_type!r}, {len(self.data)} bytes)"


# ── Preserved details ─────────────────────────────────────────────────────────

# Fixed enumeration order — also the order labels appear in the prompt.
PRESERVATION_LABELS: Dict[str, str] = {
    "typography": "Typography",
    "style": "Style",
    "color": "Color Palette",
    "icon": "Icon / Shape",
    "background_color": "Background Color",
}

_FLAG_ALIASES: Dict[str, str] = {
    "typography": "typography",
    "style": "style",
    "color": "color",
    "colorPalette": "color",
    "color_palette": "color",
    "icon": "icon",
    "iconShape": "icon",
    "icon_shape": "icon",
    "background_color": "background_color",
    "backgroundColor": "background_color",
}


class PreservationSet(BaseModel):
    """Which attributes of the original logo must survive the remix. All on by default."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    typography: bool = Field(default=True, description="Keep the original lettering style")
    style: bool = Field(default=True, description="Keep the overall rendering style")
    color: bool = Field(default=True, description="Keep the color palette")
    icon: bool = Field(default=True, description="Keep the icon / mark shape")
    background_color: bool = Field(default=True, description="Keep the background color")

    def __init__(self, **data: object) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise InvalidPreservationSet(f"Invalid preservation flags ({problems})") from exc

    @classmethod
    def from_flags(cls, flags: Optional[Mapping[str, object]]) -> "PreservationSet":
        """
        Build a set from a partial mapping (form checkboxes, JSON, etc.).

        Keys may use the camelCase names of the web form. A key that is not
        present counts as NOT preserved.
        """
        resolved = {key: False for key in PRESERVATION_LABELS}
        for key, value in (flags or {}).items():
            name = _FLAG_ALIASES.get(key)
            if name is None:
                raise InvalidPreservationSet(f"Unknown preservation flag: {key!r}")
            if not isinstance(value, bool):
                raise InvalidPreservationSet(
                    f"Preservation flag {key!r} must be true or false, got {value!r}"
                )
            resolved[name] = value
        return cls(**resolved)

    @classmethod
    def none(cls) -> "PreservationSet":
        return cls(**{key: False for key in PRESERVATION_LABELS})

    def preserved_keys(self) -> List[str]:
        return [key for key in PRESERVATION_LABELS if getattr(self, key)]

    def labels(self) -> List[str]:
        return [PRESERVATION_LABELS[key] for key in self.preserved_keys()]

    def toggled(self, key: str) -> "PreservationSet":
        name = _FLAG_ALIASES.get(key)
        if name is None:
            raise InvalidPreservationSet(f"Unknown preservation flag: {key!r}")
        return self.model_copy(update={name: not getattr(self, name)})


# ── Request / result ──────────────────────────────────────────────────────────

@dataclass
class GenerationRequest:
    source_image: Optional[ImagePayload]
    brand_name: str = ""
    industry: str = ""
    change_instructions: str = ""
    preservation: PreservationSet = field(default_factory=PreservationSet)

    def __post_init__(self) -> None:
        if self.source_image is None:
            raise MissingSourceImage()
        self.brand_name = self.brand_name or ""
        self.industry = self.industry or ""
        self.change_instructions = self.change_instructions or ""
        if self.preservation is None:
            self.preservation = PreservationSet()


@dataclass(frozen=True)
class GenerationResult:
    image_bytes: Optional[bytes] = None
    failure: Optional[GenerationFailure] = None

    def __post_init__(self) -> None:
        if (self.image_bytes is None) == (self.failure is None):
            raise ValueError("GenerationResult needs exactly one of image_bytes / failure")

    @classmethod
    def success(cls, image_bytes: bytes) -> "GenerationResult":
        return cls(image_bytes=image_bytes)

    @classmethod
    def failed(cls, failure: GenerationFailure) -> "GenerationResult":
        return cls(failure=failure)

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def error_message(self) -> str:
        return str(self.failure) if self.failure is not None else ""
