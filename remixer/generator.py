"""
Generator — sends the original logo + remix prompt to Gemini and returns the
regenerated logo bytes.

One request per call: no retries, no model fallback ladder, no timeout. The
call either yields the first inline image Gemini returns or raises a
GenerationFailure.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Any, Iterable, Optional

from google.genai import types

from .config import DEFAULT_MODEL
from .errors import GenerationCancelled, GenerationFailure, NoImageReturned, ServiceCallFailed
from .models import GenerationRequest, GenerationResult, ImagePayload, PreservationSet
from .prompt import build_prompt

logger = logging.getLogger(__name__)


def _build_contents(image: ImagePayload, prompt: str) -> list:
    # Image first, then the instructions.
    return [
        types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
        types.Part.from_text(text=prompt),
    ]


def _iter_parts(response: Any) -> Iterable[Any]:
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            yield part


def extract_image_bytes(response: Any) -> bytes:
    """Return the first inline image in ``response``; raise NoImageReturned if none."""
    for part in _iter_parts(response):
        inline = getattr(part, "inline_data", None)
        if inline is None or not getattr(inline, "data", None):
            continue
        data = inline.data
        if isinstance(data, str):
            try:
                data = base64.b64decode(data, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise NoImageReturned("Gemini returned undecodable image data.") from exc
        return data
    raise NoImageReturned()


async def _await_or_cancel(request: "asyncio.Future[Any]", cancel: asyncio.Event) -> Any:
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        done, _ = await asyncio.wait({request, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        request.cancel()
        raise
    finally:
        waiter.cancel()

    if request in done:
        return request.result()

    request.cancel()
    raise GenerationCancelled()


async def generate_image(
    client: Any,
    image: ImagePayload,
    brand_name: Optional[str] = "",
    industry: Optional[str] = "",
    change_instructions: Optional[str] = "",
    preservation: Optional[PreservationSet] = None,
    *,
    model: str = DEFAULT_MODEL,
    cancel: Optional[asyncio.Event] = None,
) -> bytes:
    """
    Regenerate ``image`` as a logo for the new brand.

    Args:
        client:              google.genai.Client (or anything exposing
                             ``aio.models.generate_content``)
        image:               the original logo
        brand_name:          new brand name; blank keeps the existing text
        industry:            business sector; blank lets the model infer it
        change_instructions: free-text edits; blank means "adapt only"
        preservation:        attributes to keep; None means all preserved
        model:               Gemini image model name
        cancel:              optional event; setting it abandons the request

    Returns:
        Raw bytes of the first image part in the response.

    Raises:
        ServiceCallFailed:   the SDK call raised (wrapped, original chained)
        NoImageReturned:     the response held no inline image
        GenerationCancelled: ``cancel`` was set before the response arrived
    """
    if preservation is None:
        preservation = PreservationSet()
    prompt = build_prompt(brand_name, industry, change_instructions, preservation)
    logger.debug("Sending prompt to Gemini (%s):\n%s", model, prompt)

    config = types.GenerateContentConfig(response_modalities=["IMAGE"])
    try:
        call = client.aio.models.generate_content(
            model=model,
            contents=_build_contents(image, prompt),
            config=config,
        )
        if cancel is None:
            response = await call
        else:
            response = await _await_or_cancel(asyncio.ensure_future(call), cancel)
    except (GenerationFailure, asyncio.CancelledError):
        raise
    except Exception as exc:
        logger.error("Error calling Gemini API: %s", exc)
        raise ServiceCallFailed(exc) from exc

    data = extract_image_bytes(response)
    logger.info("Received %d bytes of image data from %s", len(data), model)
    return data


async def remix_logo(
    client: Any,
    request: GenerationRequest,
    *,
    model: str = DEFAULT_MODEL,
    cancel: Optional[asyncio.Event] = None,
) -> GenerationResult:
    """Run one generation and fold any GenerationFailure into the result value."""
    try:
        data = await generate_image(
            client,
            request.source_image,
            request.brand_name,
            request.industry,
            request.change_instructions,
            request.preservation,
            model=model,
            cancel=cancel,
        )
    except GenerationFailure as exc:
        return GenerationResult.failed(exc)
    return GenerationResult.success(data)
