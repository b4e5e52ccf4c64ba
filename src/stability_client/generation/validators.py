"""Parameter checks shared by the generation builders and request models.

Each function returns the value unchanged when it is acceptable and raises
``ImageBuilderError`` (carrying the offending value) otherwise, so setters
can validate and assign in one line. The ``Annotated`` aliases at the bottom
attach the same checks to the request model fields.
"""

from typing import Annotated

from pydantic import AfterValidator

from stability_client.core.exceptions import ImageBuilderError

from .common import TextPrompt

MAX_CFG_SCALE = 35
MAX_SAMPLES = 10
MIN_STEPS = 10
MAX_STEPS = 150
MIN_DIMENSION = 128
DIMENSION_MULTIPLE = 64
MIN_UPSCALE_DIMENSION = 512
MAX_SEED = 4294967294


def require_integer(name: str, value) -> int:
    # bool is an int subclass but never a meaningful count or size
    if isinstance(value, bool) or not isinstance(value, int):
        raise ImageBuilderError(f"{name} must be an integer, but was {value!r}", value)
    return value


def require_number(name: str, value) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ImageBuilderError(f"{name} must be a number, but was {value!r}", value)
    return value


def validate_dimension(name: str, value: int) -> int:
    """Height/width for generation: a multiple of 64, at least 128."""
    require_integer(name, value)
    if value % DIMENSION_MULTIPLE != 0:
        raise ImageBuilderError(
            f"{name} must be a multiple of {DIMENSION_MULTIPLE}, but was {value}", value
        )
    if value < MIN_DIMENSION:
        raise ImageBuilderError(f"{name} must not be less than {MIN_DIMENSION}, but was {value}", value)
    return value


def validate_upscale_dimension(name: str, value: int) -> int:
    """Target height/width for upscaling: at least 512."""
    require_integer(name, value)
    if value < MIN_UPSCALE_DIMENSION:
        raise ImageBuilderError(
            f"{name} must not be less than {MIN_UPSCALE_DIMENSION}, but was {value}", value
        )
    return value


def validate_cfg_scale(value: int | float) -> int | float:
    require_number("cfg_scale", value)
    if value > MAX_CFG_SCALE:
        raise ImageBuilderError(f"cfg_scale must be no greater than {MAX_CFG_SCALE}, but was {value}", value)
    if value < 0:
        raise ImageBuilderError(f"cfg_scale must not be negative, but was {value}", value)
    return value


def validate_samples(value: int) -> int:
    require_integer("samples", value)
    if value > MAX_SAMPLES:
        raise ImageBuilderError(f"samples must be no greater than {MAX_SAMPLES}, but was {value}", value)
    if value < 1:
        raise ImageBuilderError(f"samples must be at least 1, but was {value}", value)
    return value


def validate_steps(value: int) -> int:
    require_integer("steps", value)
    if value > MAX_STEPS:
        raise ImageBuilderError(f"steps must be no greater than {MAX_STEPS}, but was {value}", value)
    if value < MIN_STEPS:
        raise ImageBuilderError(f"steps must be no less than {MIN_STEPS}, but was {value}", value)
    return value


def validate_seed(value: int) -> int:
    require_integer("seed", value)
    if value < 0 or value > MAX_SEED:
        raise ImageBuilderError(f"seed must be between 0 and {MAX_SEED}, but was {value}", value)
    return value


def validate_unit_interval(name: str, value: float) -> float:
    """Strength/schedule values: 0.0 to 1.0 inclusive."""
    require_number(name, value)
    if not 0.0 <= value <= 1.0:
        raise ImageBuilderError(f"{name} must be between 0 and 1, but was {value}", value)
    return value


def require_text_prompts(prompts) -> None:
    """At least one prompt, and the first one must have text."""
    if not prompts or not prompts[0].text:
        raise ImageBuilderError("a text prompt must not be empty")


def _checked_prompts(prompts: tuple[TextPrompt, ...]) -> tuple[TextPrompt, ...]:
    require_text_prompts(prompts)
    return prompts


CfgScale = Annotated[int | float, AfterValidator(validate_cfg_scale)]
Samples = Annotated[int, AfterValidator(validate_samples)]
Seed = Annotated[int, AfterValidator(validate_seed)]
Steps = Annotated[int, AfterValidator(validate_steps)]
TextPrompts = Annotated[tuple[TextPrompt, ...], AfterValidator(_checked_prompts)]
