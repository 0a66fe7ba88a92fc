"""Contact-quality model: maximum potential exit speed and contact efficiency."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import TYPE_CHECKING, Any

from .constants import (
    DEFAULT_INPUT_SPEED_MPH,
    INPUT_SPEED_BREAKPOINTS_MPH,
    INPUT_SPEED_COEFFICIENTS,
    QUALITY_THRESHOLD_PCT,
    SOURCE_SPEED_COEFFICIENT,
)

if TYPE_CHECKING:
    from .matching import MatchedPair


@dataclass(frozen=True)
class QualityModelConfig:
    """Piecewise-linear exit-speed model and squared-up threshold."""

    quality_threshold: float = QUALITY_THRESHOLD_PCT
    default_input_speed: float = DEFAULT_INPUT_SPEED_MPH
    source_coefficient: float = SOURCE_SPEED_COEFFICIENT
    input_breakpoints: tuple[float, ...] = INPUT_SPEED_BREAKPOINTS_MPH
    input_coefficients: tuple[float, ...] = INPUT_SPEED_COEFFICIENTS

    def __post_init__(self) -> None:
        if len(self.input_coefficients) != len(self.input_breakpoints) + 1:
            raise ValueError("input_coefficients must have one more entry than input_breakpoints")
        if any(b <= a for a, b in zip(self.input_breakpoints, self.input_breakpoints[1:])):
            raise ValueError("input_breakpoints must be strictly increasing")
        if self.default_input_speed <= 0:
            raise ValueError("default_input_speed must be > 0")


@dataclass(frozen=True)
class ContactQuality:
    """Model output for one paired swing."""

    max_potential_speed: float
    efficiency: float
    qualified: bool


def resolve_input_speed(value: Any, config: QualityModelConfig = QualityModelConfig()) -> float:
    """Input (pitch) speed with the configured fallback for absent or non-positive values."""
    if value is None or isinstance(value, bool):
        return config.default_input_speed
    try:
        speed = float(value)
    except (TypeError, ValueError):
        return config.default_input_speed
    if math.isnan(speed) or speed <= 0:
        return config.default_input_speed
    return speed


def input_speed_coefficient(
    input_speed: float, config: QualityModelConfig = QualityModelConfig()
) -> float:
    """Coefficient for the input-speed bucket; each bucket includes its lower edge."""
    for breakpoint, coefficient in zip(config.input_breakpoints, config.input_coefficients):
        if input_speed < breakpoint:
            return coefficient
    return config.input_coefficients[-1]


def max_potential_speed(
    source_speed: float,
    input_speed: float | None,
    config: QualityModelConfig = QualityModelConfig(),
) -> float:
    """Best exit speed the swing could produce against this input speed."""
    resolved = resolve_input_speed(input_speed, config)
    coefficient = input_speed_coefficient(resolved, config)
    return config.source_coefficient * source_speed + coefficient * resolved


def contact_efficiency(achieved_speed: float, max_potential: float) -> float:
    """Achieved exit speed as a percentage of the model maximum."""
    if max_potential <= 0:
        return 0.0
    return achieved_speed / max_potential * 100.0


def assess_contact(
    pair: MatchedPair, config: QualityModelConfig = QualityModelConfig()
) -> ContactQuality:
    """Score one matched pair against the squared-up threshold."""
    potential = max_potential_speed(pair.motion.source_speed, pair.contact.input_speed, config)
    efficiency = contact_efficiency(pair.contact.achieved_speed, potential)
    return ContactQuality(
        max_potential_speed=potential,
        efficiency=efficiency,
        qualified=efficiency >= config.quality_threshold,
    )
