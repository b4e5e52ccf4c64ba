"""Tests for stability_client.generation.text_to_image.

Tests cover:
- Builder defaults and the JSON payload they produce.
- Setter validation and build-time checks.
- generate / generate_png against a mock transport.
"""

from __future__ import annotations

import json

import pytest

from stability_client.api.models import ImageResponse
from stability_client.core.exceptions import ApiError, ImageBuilderError, StabilityError
from stability_client.generation.common import ClipGuidancePreset, Sampler, StylePreset, TextPrompt
from stability_client.generation.text_to_image import TextToImage, TextToImageBuilder

ENGINE = "stable-diffusion-xl-1024-v1-0"


def _builder() -> TextToImageBuilder:
    return TextToImageBuilder().style_preset(StylePreset.DIGITAL_ART).text_prompt("a castle")


class TestTextToImageBuilder:
    """Tests for TextToImageBuilder."""

    def test_defaults(self):
        """Unset fields take the documented defaults."""
        request = _builder().build()

        assert request.height == 1024
        assert request.width == 1024
        assert request.cfg_scale == 7
        assert request.samples == 1
        assert request.seed == 0
        assert request.steps == 50
        assert request.sampler is None
        assert request.clip_guidance_preset is None
        assert request.style_preset is StylePreset.DIGITAL_ART
        assert request.text_prompts == (TextPrompt(text="a castle", weight=1.0),)

    def test_default_payload(self):
        """The default JSON body omits sampler and clip guidance entirely."""
        payload = _builder().build().to_payload()

        assert payload == {
            "height": 1024,
            "width": 1024,
            "text_prompts": [{"text": "a castle", "weight": 1.0}],
            "cfg_scale": 7,
            "samples": 1,
            "seed": 0,
            "steps": 50,
            "style_preset": "digital-art",
        }

    def test_full_payload(self):
        """Explicit values and optional enums appear in the body."""
        request = (
            TextToImageBuilder()
            .height(512)
            .width(768)
            .cfg_scale(27)
            .samples(2)
            .steps(33)
            .seed(42)
            .sampler(Sampler.K_DPMPP_2M)
            .clip_guidance_preset(ClipGuidancePreset.FAST_BLUE)
            .style_preset(StylePreset.THREE_D_MODEL)
            .text_prompt("A scholar tired at his desk", 1.0)
            .text_prompt("blurry", -0.5)
            .build()
        )
        payload = json.loads(request.to_json())

        assert payload["height"] == 512
        assert payload["width"] == 768
        assert payload["cfg_scale"] == 27
        assert payload["samples"] == 2
        assert payload["steps"] == 33
        assert payload["seed"] == 42
        assert payload["sampler"] == "K_DPMPP_2M"
        assert payload["clip_guidance_preset"] == "FAST_BLUE"
        assert payload["style_preset"] == "3d-model"
        assert payload["text_prompts"] == [
            {"text": "A scholar tired at his desk", "weight": 1.0},
            {"text": "blurry", "weight": -0.5},
        ]

    def test_extras_are_passed_through(self):
        payload = _builder().extras({"tiling": True}).build().to_payload()
        assert payload["extras"] == {"tiling": "True"}

    def test_string_enum_values_accepted(self):
        request = _builder().style_preset("anime").sampler("K_EULER").build()
        assert request.style_preset is StylePreset.ANIME
        assert request.sampler is Sampler.K_EULER

    def test_unknown_enum_value(self):
        with pytest.raises(ImageBuilderError, match="style_preset must be one of"):
            TextToImageBuilder().style_preset("watercolour")

    def test_setters_chain(self):
        builder = TextToImageBuilder()
        assert builder.height(512) is builder
        assert builder.cfg_scale(10) is builder

    @pytest.mark.parametrize(
        "setter, value, message",
        [
            ("height", 1000, "height must be a multiple of 64, but was 1000"),
            ("width", 64, "width must not be less than 128, but was 64"),
            ("cfg_scale", 36, "cfg_scale must be no greater than 35, but was 36"),
            ("samples", 11, "samples must be no greater than 10, but was 11"),
            ("steps", 151, "steps must be no greater than 150, but was 151"),
            ("steps", 9, "steps must be no less than 10, but was 9"),
        ],
    )
    def test_setter_rejects_out_of_range(self, setter: str, value: int, message: str):
        """Bad values fail at the setter, before build()."""
        with pytest.raises(ImageBuilderError, match=message):
            getattr(TextToImageBuilder(), setter)(value)

    def test_missing_style_preset(self):
        with pytest.raises(ImageBuilderError, match="a style preset must be set"):
            TextToImageBuilder().text_prompt("a castle").build()

    def test_missing_prompt(self):
        with pytest.raises(ImageBuilderError, match="a text prompt must not be empty"):
            TextToImageBuilder().style_preset(StylePreset.ANIME).build()

    def test_empty_first_prompt(self):
        with pytest.raises(ImageBuilderError, match="a text prompt must not be empty"):
            TextToImageBuilder().style_preset(StylePreset.ANIME).text_prompt("").build()

    def test_request_is_frozen(self):
        request = _builder().build()
        with pytest.raises(Exception):
            request.height = 512

    def test_builder_is_reusable(self):
        """Each build() returns an independent request."""
        builder = _builder()
        first = builder.build()
        builder.text_prompt("a moat")
        second = builder.build()

        assert len(first.text_prompts) == 1
        assert len(second.text_prompts) == 2


class TestTextToImageGenerate:
    """Tests for sending text-to-image requests."""

    def test_generate(self, mock_transport, artifacts_body):
        """generate posts JSON and decodes the artifacts."""
        transport = mock_transport(json_body=artifacts_body)
        request = _builder().build()

        response = request.generate(ENGINE, transport=transport)

        assert isinstance(response, ImageResponse)
        assert [a.seed for a in response.artifacts] == [1234, 5678]

        sent = transport.last_request
        assert sent.method == "POST"
        assert str(sent.url) == f"https://api.stability.ai/v1/generation/{ENGINE}/text-to-image"
        assert sent.headers["accept"] == "application/json"
        assert sent.headers["content-type"] == "application/json"
        assert json.loads(sent.content) == request.to_payload()

    def test_engine_is_lowercased(self, mock_transport, artifacts_body):
        transport = mock_transport(json_body=artifacts_body)
        _builder().build().generate("Stable-Diffusion-XL-1024-v1-0", transport=transport)

        assert transport.last_request.url.path == f"/v1/generation/{ENGINE}/text-to-image"

    def test_generate_png(self, mock_transport, png_bytes):
        """generate_png asks for image/png and returns the body unchanged."""
        transport = mock_transport(content=png_bytes, headers={"content-type": "image/png"})

        data = _builder().build().generate_png(ENGINE, transport=transport)

        assert data == png_bytes
        assert transport.last_request.headers["accept"] == "image/png"

    def test_generate_api_error(self, mock_transport):
        transport = mock_transport(
            status_code=400,
            json_body={"id": "x1", "name": "invalid_prompts", "message": "prompt was filtered"},
        )

        with pytest.raises(ApiError) as exc_info:
            _builder().build().generate(ENGINE, transport=transport)

        assert exc_info.value.status_code == 400
        assert exc_info.value.error.name == "invalid_prompts"

    def test_generate_with_explicit_settings(self, mock_transport, artifacts_body, test_settings):
        transport = mock_transport(json_body=artifacts_body)
        _builder().build().generate(ENGINE, settings=test_settings, transport=transport)
        assert transport.last_request.headers["authorization"] == "Bearer sk-test-key"


class TestTextToImageModel:
    """TextToImage enforces the builder's rules when constructed directly."""

    @staticmethod
    def _fields(**overrides) -> dict:
        fields = {
            "height": 512,
            "width": 512,
            "text_prompts": (TextPrompt(text="x"),),
            "cfg_scale": 7,
            "samples": 1,
            "seed": 0,
            "steps": 30,
            "style_preset": "anime",
        }
        fields.update(overrides)
        return fields

    def test_valid_direct_construction(self):
        request = TextToImage(**self._fields())
        assert request.style_preset is StylePreset.ANIME

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"height": 100}, "height must be a multiple of 64, but was 100"),
            ({"width": 64}, "width must not be less than 128, but was 64"),
            ({"text_prompts": ()}, "a text prompt must not be empty"),
            ({"text_prompts": (TextPrompt(text=""),)}, "a text prompt must not be empty"),
            ({"cfg_scale": 99}, "cfg_scale must be no greater than 35, but was 99"),
            ({"samples": 50}, "samples must be no greater than 10, but was 50"),
            ({"steps": 1}, "steps must be no less than 10, but was 1"),
            ({"seed": -1}, "seed must be between 0 and"),
        ],
    )
    def test_invalid_direct_construction(self, overrides: dict, message: str):
        with pytest.raises(ImageBuilderError, match=message):
            TextToImage(**self._fields(**overrides))

    def test_type_errors_are_builder_errors(self):
        """Malformed field types are reported as ImageBuilderError too."""
        with pytest.raises(ImageBuilderError, match="invalid TextToImage"):
            TextToImage(**self._fields(height="tall"))

    def test_missing_field(self):
        fields = self._fields()
        del fields["style_preset"]
        with pytest.raises(ImageBuilderError, match="invalid TextToImage"):
            TextToImage(**fields)


class TestSetterTypes:
    """Wrongly typed setter arguments raise ImageBuilderError."""

    def test_non_numeric_prompt_weight(self):
        with pytest.raises(ImageBuilderError) as exc_info:
            TextToImageBuilder().text_prompt("x", "heavy")
        assert exc_info.value.value == "heavy"

    def test_string_steps(self):
        with pytest.raises(ImageBuilderError, match="steps must be an integer, but was '20'"):
            TextToImageBuilder().steps("20")

    def test_none_height(self):
        with pytest.raises(ImageBuilderError, match="height must be an integer, but was None"):
            TextToImageBuilder().height(None)

    def test_non_numeric_cfg_scale(self):
        with pytest.raises(ImageBuilderError, match="cfg_scale must be a number"):
            TextToImageBuilder().cfg_scale("high")

    def test_errors_are_package_errors(self):
        with pytest.raises(StabilityError):
            TextToImageBuilder().samples(2.5)
