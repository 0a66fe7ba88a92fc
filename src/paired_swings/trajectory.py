"""Fixed-step ballistic flight model with quadratic drag."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math

from .constants import (
    CONTACT_HEIGHT_FT,
    DRAG_COEFFICIENT,
    GRAVITY_FT_PER_S2,
    MAX_INTEGRATION_STEPS,
    MPH_TO_FEET_PER_SECOND,
    SAMPLE_DT_SECONDS,
    SAMPLE_MARGIN_FT,
    SCAN_DT_SECONDS,
    SCAN_MAX_DISTANCE_FT,
)

logger = logging.getLogger(__name__)

Point = tuple[float, float]


@dataclass(frozen=True)
class FlightModelConfig:
    """Flight constants; distances in feet, speeds in ft/s unless noted."""

    drag_coefficient: float = DRAG_COEFFICIENT
    gravity_ft_s2: float = GRAVITY_FT_PER_S2
    mph_to_fps: float = MPH_TO_FEET_PER_SECOND
    contact_height_ft: float = CONTACT_HEIGHT_FT
    scan_dt_s: float = SCAN_DT_SECONDS
    sample_dt_s: float = SAMPLE_DT_SECONDS
    scan_max_distance_ft: float = SCAN_MAX_DISTANCE_FT
    sample_margin_ft: float = SAMPLE_MARGIN_FT
    max_steps: int = MAX_INTEGRATION_STEPS

    def __post_init__(self) -> None:
        if self.scan_dt_s <= 0 or self.sample_dt_s <= 0:
            raise ValueError("integration steps must be > 0")
        if self.max_steps < 1:
            raise ValueError("max_steps must be >= 1")


@dataclass(frozen=True)
class FlightState:
    """Ball position and velocity at one integration step."""

    x: float
    y: float
    vx: float
    vy: float

    @property
    def point(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class TrajectoryResult:
    """Projected carry and the polyline used to draw it."""

    max_distance: float
    sample_points: tuple[Point, ...]


def initial_state(
    launch_speed_mph: float,
    launch_angle_deg: float,
    config: FlightModelConfig = FlightModelConfig(),
) -> FlightState:
    """State at contact: speed converted to ft/s, launched from contact height."""
    speed_fps = launch_speed_mph * config.mph_to_fps
    angle_rad = math.radians(launch_angle_deg)
    return FlightState(
        x=0.0,
        y=config.contact_height_ft,
        vx=speed_fps * math.cos(angle_rad),
        vy=speed_fps * math.sin(angle_rad),
    )


def step(state: FlightState, dt: float, config: FlightModelConfig = FlightModelConfig()) -> FlightState:
    """One forward-Euler step: drag, then gravity, then advance position."""
    speed = math.hypot(state.vx, state.vy)
    if speed > 0:
        drag = config.drag_coefficient * speed * speed
        drag_x = state.vx / speed * drag
        drag_y = state.vy / speed * drag
    else:
        drag_x = drag_y = 0.0

    vx = state.vx - drag_x * dt
    vy = state.vy - config.gravity_ft_s2 * dt - drag_y * dt
    return FlightState(x=state.x + vx * dt, y=state.y + vy * dt, vx=vx, vy=vy)


def carry_distance(
    launch_speed_mph: float,
    launch_angle_deg: float,
    config: FlightModelConfig = FlightModelConfig(),
) -> float:
    """Horizontal distance where the ball lands, scanned at the fine step."""
    state = initial_state(launch_speed_mph, launch_angle_deg, config)
    steps = 0
    while state.y > 0 and state.x < config.scan_max_distance_ft:
        if steps >= config.max_steps:
            logger.warning(
                "Carry scan hit %d steps at %.1f mph / %.1f deg",
                config.max_steps,
                launch_speed_mph,
                launch_angle_deg,
            )
            break
        state = step(state, config.scan_dt_s, config)
        steps += 1
    return max(0.0, state.x)


def sample_trajectory(
    launch_speed_mph: float,
    launch_angle_deg: float,
    bound_x_ft: float,
    config: FlightModelConfig = FlightModelConfig(),
) -> tuple[Point, ...]:
    """Polyline of the flight at the coarse step, closed on the ground when it lands."""
    state = initial_state(launch_speed_mph, launch_angle_deg, config)
    points: list[Point] = []
    while state.y > 0 and state.x < bound_x_ft and len(points) < config.max_steps:
        points.append(state.point)
        state = step(state, config.sample_dt_s, config)

    if state.y <= 0:
        points.append((state.x, 0.0))
    return tuple(points)


def simulate(
    launch_speed_mph: float,
    launch_angle_deg: float,
    config: FlightModelConfig = FlightModelConfig(),
) -> TrajectoryResult:
    """Carry distance from the fine scan and a drawing polyline from the coarse pass.

    The two passes use different step sizes, so the polyline's landing point can
    differ slightly from ``max_distance``.
    """
    max_distance = carry_distance(launch_speed_mph, launch_angle_deg, config)
    points = sample_trajectory(
        launch_speed_mph,
        launch_angle_deg,
        max_distance + config.sample_margin_ft,
        config,
    )
    return TrajectoryResult(max_distance=max_distance, sample_points=points)
