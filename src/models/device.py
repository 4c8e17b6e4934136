"""
Device metadata model

Populated from /xled/v1/gestalt once the session is established.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class DeviceInfo:
    """
    Static device capabilities

    Attributes:
        number_of_leds: Addressable pixel count
        bytes_per_led: Channel count used by the realtime encoder (3 = RGB, 4 = WRGB)
        frame_rate: Device frame rate in Hz, drives the frame-pacing loop
        product_name: Informational only
    """

    number_of_leds: int
    bytes_per_led: int
    frame_rate: float
    product_name: str = ""

    @classmethod
    def from_gestalt(cls, data: Dict[str, Any]) -> 'DeviceInfo':
        """
        Build from a gestalt response body

        Raises:
            KeyError: if a required field is missing
        """
        return cls(
            number_of_leds=int(data["number_of_led"]),
            bytes_per_led=int(data["bytes_per_led"]),
            frame_rate=float(data["frame_rate"]),
            product_name=str(data.get("product_name", "")),
        )

    @property
    def frame_interval_ms(self) -> float:
        return 1000.0 / self.frame_rate if self.frame_rate > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number_of_leds": self.number_of_leds,
            "bytes_per_led": self.bytes_per_led,
            "frame_rate": self.frame_rate,
            "product_name": self.product_name,
        }
