"""Standard OpenMower telemetry channels."""

from __future__ import annotations

from typing import Iterable, Optional

from .. import constants
from ..core import ChannelDescriptor
from .decoders import (
    decode_gps,
    decode_high_level_status,
    decode_imu,
    decode_status,
    decode_wheel_ticks,
)

STATUS = "status"
IMU = "imu"
GPS = "gps"
WHEEL_TICKS = "wheel_ticks"
HIGH_LEVEL_STATUS = "high_level_status"

STANDARD_CHANNELS: dict[str, ChannelDescriptor] = {
    descriptor.name: descriptor
    for descriptor in (
        ChannelDescriptor(
            name=STATUS,
            endpoint=f"{constants.SUBSCRIBE_PATH_PREFIX}/status",
            decode=decode_status,
            label="Status",
        ),
        ChannelDescriptor(
            name=IMU,
            endpoint=f"{constants.SUBSCRIBE_PATH_PREFIX}/imu",
            decode=decode_imu,
            label="IMU",
        ),
        ChannelDescriptor(
            name=GPS,
            endpoint=f"{constants.SUBSCRIBE_PATH_PREFIX}/gps",
            decode=decode_gps,
            label="GPS",
        ),
        ChannelDescriptor(
            name=WHEEL_TICKS,
            endpoint=f"{constants.SUBSCRIBE_PATH_PREFIX}/ticks",
            decode=decode_wheel_ticks,
            label="Wheel Ticks",
        ),
        ChannelDescriptor(
            name=HIGH_LEVEL_STATUS,
            endpoint=f"{constants.SUBSCRIBE_PATH_PREFIX}/highLevelStatus",
            decode=decode_high_level_status,
            label="High Level Status",
        ),
    )
}


def default_channel_descriptors(
    names: Optional[Iterable[str]] = None,
) -> list[ChannelDescriptor]:
    """Return descriptors for the standard channels, optionally filtered.

    Raises:
        KeyError: If ``names`` contains an unknown channel.
    """

    if names is None:
        return list(STANDARD_CHANNELS.values())

    descriptors = []
    for name in names:
        try:
            descriptors.append(STANDARD_CHANNELS[name])
        except KeyError:
            raise KeyError(f"Unknown telemetry channel: {name!r}") from None
    return descriptors
