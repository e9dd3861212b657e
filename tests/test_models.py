"""Tests for the remix data model."""

from __future__ import annotations

import base64

import pytest

from remixer.errors import (
    InvalidPreservationSet,
    MissingSourceImage,
    NoImageReturned,
)
from remixer.models import (
    PRESERVATION_LABELS,
    GenerationRequest,
    GenerationResult,
    ImagePayload,
    PreservationSet,
)


class TestImagePayload:
    def test_empty_data_is_missing_image(self):
        with pytest.raises(MissingSourceImage):
            ImagePayload(data=b"", mime_type="image/png")

    def test_non_image_mime_type_rejected(self):
        with pytest.raises(ValueError, match="Not an image media type"):
            ImagePayload(data=b"abc", mime_type="text/plain")

    def test_is_immutable(self, logo):
        with pytest.raises(AttributeError):
            logo.mime_type = "image/jpeg"

    def test_from_data_url(self, logo_png):
        url = "data:image/png;base64," + base64.b64encode(logo_png).decode()
        payload = ImagePayload.from_data_url(url)
        assert payload.data == logo_png
        assert payload.mime_type == "image/png"

    @pytest.mark.parametrize("url", ["no-comma-here", "data:;base64,AAAA", ",AAAA"])
    def test_malformed_data_url(self, url):
        with pytest.raises(ValueError):
            ImagePayload.from_data_url(url)

    def test_invalid_base64(self):
        with pytest.raises(ValueError, match="Invalid base64"):
            ImagePayload.from_base64("***", "image/png")

    def test_base64_helpers_agree(self, logo):
        again = ImagePayload.from_base64(logo.to_base64(), logo.mime_type)
        assert again == logo

    def test_repr_hides_bytes(self, logo):
        assert "bytes" in repr(logo)
        assert "\\x89PNG" not in repr(logo)


class TestPreservationSet:
    def test_defaults_preserve_everything(self):
        assert PreservationSet().preserved_keys() == list(PRESERVATION_LABELS)

    def test_none_preserves_nothing(self):
        assert PreservationSet.none().labels() == []

    def test_from_flags_missing_keys_are_false(self):
        preservation = PreservationSet.from_flags({"style": True})
        assert preservation.preserved_keys() == ["style"]

    def test_from_flags_empty_or_none(self):
        assert PreservationSet.from_flags({}) == PreservationSet.none()
        assert PreservationSet.from_flags(None) == PreservationSet.none()

    def test_from_flags_accepts_form_aliases(self):
        preservation = PreservationSet.from_flags(
            {"colorPalette": True, "iconShape": True, "backgroundColor": True}
        )
        assert preservation.labels() == ["Color Palette", "Icon / Shape", "Background Color"]

    def test_unknown_flag_rejected(self):
        with pytest.raises(InvalidPreservationSet, match="Unknown preservation flag"):
            PreservationSet.from_flags({"gradient": True})

    def test_non_boolean_flag_rejected(self):
        with pytest.raises(InvalidPreservationSet, match="must be true or false"):
            PreservationSet.from_flags({"style": "yes"})

    def test_toggled_returns_new_set(self):
        original = PreservationSet()
        toggled = original.toggled("backgroundColor")
        assert original.background_color is True
        assert toggled.background_color is False

    def test_toggled_unknown_flag(self):
        with pytest.raises(InvalidPreservationSet):
            PreservationSet().toggled("nope")

    def test_is_frozen(self):
        with pytest.raises(Exception):
            PreservationSet().style = False

    def test_direct_construction_rejects_non_boolean(self):
        with pytest.raises(InvalidPreservationSet, match="typography"):
            PreservationSet(typography=1)

    def test_direct_construction_rejects_unknown_field(self):
        with pytest.raises(InvalidPreservationSet, match="gradient"):
            PreservationSet(gradient=True)


class TestGenerationRequest:
    def test_missing_image(self):
        with pytest.raises(MissingSourceImage):
            GenerationRequest(source_image=None)

    def test_defaults(self, logo):
        request = GenerationRequest(source_image=logo, brand_name=None)
        assert request.brand_name == ""
        assert request.industry == ""
        assert request.change_instructions == ""
        assert request.preservation == PreservationSet()


class TestGenerationResult:
    def test_success(self):
        result = GenerationResult.success(b"png")
        assert result.ok
        assert result.image_bytes == b"png"
        assert result.error_message == ""

    def test_failure(self):
        result = GenerationResult.failed(NoImageReturned())
        assert not result.ok
        assert result.image_bytes is None
        assert "No image data" in result.error_message

    def test_exactly_one_field(self):
        with pytest.raises(ValueError):
            GenerationResult()
        with pytest.raises(ValueError):
            GenerationResult(image_bytes=b"x", failure=NoImageReturned())
