"""Telemetry channels, decoders and the subscription manager."""

from .channel import Channel, ChannelClosedError
from .channels import STANDARD_CHANNELS, default_channel_descriptors
from .decoders import (
    decode_gps,
    decode_high_level_status,
    decode_imu,
    decode_status,
    decode_wheel_ticks,
)
from .manager import SubscriptionManager
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

__all__ = [
    "Channel",
    "ChannelClosedError",
    "EscStatus",
    "Gps",
    "HighLevelStatus",
    "Imu",
    "Point",
    "Pose",
    "PoseWithCovariance",
    "Quaternion",
    "STANDARD_CHANNELS",
    "Status",
    "SubscriptionManager",
    "Vector3",
    "WheelTicks",
    "decode_gps",
    "decode_high_level_status",
    "decode_imu",
    "decode_status",
    "decode_wheel_ticks",
    "default_channel_descriptors",
]
