"""Typed payloads for the OpenMower telemetry channels.

Every field is optional: a field missing from a message is ``None`` in the
decoded value and is never carried over from an earlier message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

MOWER_STATUS_ON = 255

_STATE_LABELS = {
    "IDLE": "Idle",
    "MOWING": "Mowing",
    "DOCKING": "Docking",
    "UNDOCKING": "Undocking",
    "AREA_RECORDING": "Area Recording",
}


@dataclass(slots=True, frozen=True)
class Point:
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None


@dataclass(slots=True, frozen=True)
class Vector3:
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None


@dataclass(slots=True, frozen=True)
class Quaternion:
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    w: Optional[float] = None


@dataclass(slots=True, frozen=True)
class Pose:
    position: Optional[Point] = None
    orientation: Optional[Quaternion] = None


@dataclass(slots=True, frozen=True)
class PoseWithCovariance:
    pose: Optional[Pose] = None
    covariance: Optional[tuple[float, ...]] = None


@dataclass(slots=True, frozen=True)
class EscStatus:
    status: Optional[str] = None
    current: Optional[float] = None
    tacho: Optional[float] = None
    temperature_motor: Optional[float] = None
    temperature_pcb: Optional[float] = None


@dataclass(slots=True, frozen=True)
class Status:
    mower_status: Optional[int] = None
    raspberry_pi_power: Optional[bool] = None
    gps_power: Optional[bool] = None
    esc_power: Optional[bool] = None
    rain_detected: Optional[bool] = None
    sound_module_available: Optional[bool] = None
    sound_module_busy: Optional[bool] = None
    ui_board_available: Optional[bool] = None
    ultrasonic_ranges: Optional[tuple[float, ...]] = None
    emergency: Optional[bool] = None
    v_charge: Optional[float] = None
    v_battery: Optional[float] = None
    charge_current: Optional[float] = None
    left_esc_status: Optional[EscStatus] = None
    right_esc_status: Optional[EscStatus] = None
    mow_esc_status: Optional[EscStatus] = None

    @property
    def mower_on(self) -> bool:
        return self.mower_status == MOWER_STATUS_ON


@dataclass(slots=True, frozen=True)
class Imu:
    orientation: Optional[Quaternion] = None
    orientation_covariance: Optional[tuple[float, ...]] = None
    angular_velocity: Optional[Vector3] = None
    angular_velocity_covariance: Optional[tuple[float, ...]] = None
    linear_acceleration: Optional[Vector3] = None
    linear_acceleration_covariance: Optional[tuple[float, ...]] = None


@dataclass(slots=True, frozen=True)
class Gps:
    sensor_stamp: Optional[int] = None
    received_stamp: Optional[int] = None
    source: Optional[int] = None
    flags: Optional[int] = None
    orientation_valid: Optional[int] = None
    motion_vector_valid: Optional[int] = None
    position_accuracy: Optional[float] = None
    orientation_accuracy: Optional[float] = None
    pose: Optional[PoseWithCovariance] = None
    motion_vector: Optional[Vector3] = None
    vehicle_heading: Optional[float] = None
    motion_heading: Optional[float] = None


@dataclass(slots=True, frozen=True)
class WheelTicks:
    wheel_tick_factor: Optional[int] = None
    valid_wheels: Optional[int] = None
    wheel_direction_fl: Optional[int] = None
    wheel_ticks_fl: Optional[int] = None
    wheel_direction_fr: Optional[int] = None
    wheel_ticks_fr: Optional[int] = None
    wheel_direction_rl: Optional[int] = None
    wheel_ticks_rl: Optional[int] = None
    wheel_direction_rr: Optional[int] = None
    wheel_ticks_rr: Optional[int] = None


@dataclass(slots=True, frozen=True)
class HighLevelStatus:
    state: Optional[int] = None
    state_name: Optional[str] = None
    sub_state_name: Optional[str] = None
    gps_quality_percent: Optional[float] = None
    battery_percent: Optional[float] = None
    is_charging: Optional[bool] = None
    emergency: Optional[bool] = None

    @property
    def state_label(self) -> str:
        """Human-readable name of the high-level state machine state."""
        return _STATE_LABELS.get(self.state_name or "", "Unknown")
