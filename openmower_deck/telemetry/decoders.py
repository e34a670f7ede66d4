"""Pure decoders turning raw channel messages into typed payloads."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..core.utils import (
    optional_bool,
    optional_int,
    optional_number,
    optional_number_list,
    optional_object,
    optional_str,
    parse_json_object,
)
from .schemas import (
    EscStatus,
    Gps,
    HighLevelStatus,
    Imu,
    Point,
    Pose,
    PoseWithCovariance,
    Quaternion,
    Status,
    Vector3,
    WheelTicks,
)


def decode_status(raw: str) -> Status:
    payload = parse_json_object(raw)
    return Status(
        mower_status=optional_int(payload, "MowerStatus"),
        raspberry_pi_power=optional_bool(payload, "RaspberryPiPower"),
        gps_power=optional_bool(payload, "GpsPower"),
        esc_power=optional_bool(payload, "EscPower"),
        rain_detected=optional_bool(payload, "RainDetected"),
        sound_module_available=optional_bool(payload, "SoundModuleAvailable"),
        sound_module_busy=optional_bool(payload, "SoundModuleBusy"),
        ui_board_available=optional_bool(payload, "UiBoardAvailable"),
        ultrasonic_ranges=optional_number_list(payload, "UltrasonicRanges"),
        emergency=optional_bool(payload, "Emergency"),
        v_charge=optional_number(payload, "VCharge"),
        v_battery=optional_number(payload, "VBattery"),
        charge_current=optional_number(payload, "ChargeCurrent"),
        left_esc_status=_esc_status(optional_object(payload, "LeftEscStatus")),
        right_esc_status=_esc_status(optional_object(payload, "RightEscStatus")),
        mow_esc_status=_esc_status(optional_object(payload, "MowEscStatus")),
    )


def decode_imu(raw: str) -> Imu:
    payload = parse_json_object(raw)
    return Imu(
        orientation=_quaternion(optional_object(payload, "Orientation")),
        orientation_covariance=optional_number_list(payload, "OrientationCovariance"),
        angular_velocity=_vector3(optional_object(payload, "AngularVelocity")),
        angular_velocity_covariance=optional_number_list(
            payload, "AngularVelocityCovariance"
        ),
        linear_acceleration=_vector3(optional_object(payload, "LinearAcceleration")),
        linear_acceleration_covariance=optional_number_list(
            payload, "LinearAccelerationCovariance"
        ),
    )


def decode_gps(raw: str) -> Gps:
    payload = parse_json_object(raw)
    return Gps(
        sensor_stamp=optional_int(payload, "SensorStamp"),
        received_stamp=optional_int(payload, "ReceivedStamp"),
        source=optional_int(payload, "Source"),
        flags=optional_int(payload, "Flags"),
        orientation_valid=optional_int(payload, "OrientationValid"),
        motion_vector_valid=optional_int(payload, "MotionVectorValid"),
        position_accuracy=optional_number(payload, "PositionAccuracy"),
        orientation_accuracy=optional_number(payload, "OrientationAccuracy"),
        pose=_pose_with_covariance(optional_object(payload, "Pose")),
        motion_vector=_vector3(optional_object(payload, "MotionVector")),
        vehicle_heading=optional_number(payload, "VehicleHeading"),
        motion_heading=optional_number(payload, "MotionHeading"),
    )


def decode_wheel_ticks(raw: str) -> WheelTicks:
    payload = parse_json_object(raw)
    return WheelTicks(
        wheel_tick_factor=optional_int(payload, "WheelTickFactor"),
        valid_wheels=optional_int(payload, "ValidWheels"),
        wheel_direction_fl=optional_int(payload, "WheelDirectionFl"),
        wheel_ticks_fl=optional_int(payload, "WheelTicksFl"),
        wheel_direction_fr=optional_int(payload, "WheelDirectionFr"),
        wheel_ticks_fr=optional_int(payload, "WheelTicksFr"),
        wheel_direction_rl=optional_int(payload, "WheelDirectionRl"),
        wheel_ticks_rl=optional_int(payload, "WheelTicksRl"),
        wheel_direction_rr=optional_int(payload, "WheelDirectionRr"),
        wheel_ticks_rr=optional_int(payload, "WheelTicksRr"),
    )


def decode_high_level_status(raw: str) -> HighLevelStatus:
    payload = parse_json_object(raw)
    return HighLevelStatus(
        state=optional_int(payload, "State"),
        state_name=optional_str(payload, "StateName"),
        sub_state_name=optional_str(payload, "SubStateName"),
        gps_quality_percent=optional_number(payload, "GpsQualityPercent"),
        battery_percent=optional_number(payload, "BatteryPercent"),
        is_charging=optional_bool(payload, "IsCharging"),
        emergency=optional_bool(payload, "Emergency"),
    )


# ----------------------------------------------------------------------
# Nested message types
# ----------------------------------------------------------------------
def _esc_status(payload: Optional[Mapping[str, Any]]) -> Optional[EscStatus]:
    if payload is None:
        return None
    return EscStatus(
        status=optional_str(payload, "Status"),
        current=optional_number(payload, "Current"),
        tacho=optional_number(payload, "Tacho"),
        temperature_motor=optional_number(payload, "TemperatureMotor"),
        temperature_pcb=optional_number(payload, "TemperaturePcb"),
    )


def _point(payload: Optional[Mapping[str, Any]]) -> Optional[Point]:
    if payload is None:
        return None
    return Point(
        x=optional_number(payload, "X"),
        y=optional_number(payload, "Y"),
        z=optional_number(payload, "Z"),
    )


def _vector3(payload: Optional[Mapping[str, Any]]) -> Optional[Vector3]:
    if payload is None:
        return None
    return Vector3(
        x=optional_number(payload, "X"),
        y=optional_number(payload, "Y"),
        z=optional_number(payload, "Z"),
    )


def _quaternion(payload: Optional[Mapping[str, Any]]) -> Optional[Quaternion]:
    if payload is None:
        return None
    return Quaternion(
        x=optional_number(payload, "X"),
        y=optional_number(payload, "Y"),
        z=optional_number(payload, "Z"),
        w=optional_number(payload, "W"),
    )


def _pose(payload: Optional[Mapping[str, Any]]) -> Optional[Pose]:
    if payload is None:
        return None
    return Pose(
        position=_point(optional_object(payload, "Position")),
        orientation=_quaternion(optional_object(payload, "Orientation")),
    )


def _pose_with_covariance(
    payload: Optional[Mapping[str, Any]],
) -> Optional[PoseWithCovariance]:
    if payload is None:
        return None
    return PoseWithCovariance(
        pose=_pose(optional_object(payload, "Pose")),
        covariance=optional_number_list(payload, "Covariance"),
    )
