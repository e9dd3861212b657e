"""Shared pytest fixtures for logo remixer tests."""

from __future__ import annotations

import asyncio
import io
from types import SimpleNamespace
from typing import Any, List, Optional

import pytest
from PIL import Image

from remixer.models import ImagePayload

# ============================================================================
# Fake Gemini responses
# ============================================================================


def text_part(text: str) -> SimpleNamespace:
    return SimpleNamespace(text=text, inline_data=None)


def image_part(data: Any, mime_type: str = "image/png") -> SimpleNamespace:
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def make_response(*parts: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(
        candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))]
    )


class FakeModels:
    """Stands in for ``client.aio.models``."""

    def __init__(
        self,
        response: Any = None,
        error: Optional[BaseException] = None,
        delay: float = 0.0,
    ) -> None:
        self.response = response
        self.error = error
        self.delay = delay
        self.calls: List[dict] = []
        self.cancelled = False

    async def generate_content(self, *, model: str, contents: list, config: Any) -> Any:
        self.calls.append({"model": model, "contents": contents, "config": config})
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return self.response


class FakeClient:
    def __init__(self, **kwargs: Any) -> None:
        self.models = FakeModels(**kwargs)
        self.aio = SimpleNamespace(models=self.models)


# ============================================================================
# Image fixtures
# ============================================================================


def png_bytes(size=(8, 8), color=(200, 30, 90, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def logo_png() -> bytes:
    return png_bytes()


@pytest.fixture
def logo(logo_png: bytes) -> ImagePayload:
    return ImagePayload(data=logo_png, mime_type="image/png")


@pytest.fixture
def generated_png() -> bytes:
    return png_bytes(size=(16, 16), color=(10, 200, 10, 255))
