"""
fftcore/settings.py

User-facing settings and their defaults.

Defaults:
  coloring=system, center=centerPixel, shift=shifted,
  mag_scale=linear, normalization=forward
"""

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping
import logging
import numpy as np

from .fft2d import Normalization
from .origin import CenterConvention
from .transform import TransformRequest

logger = logging.getLogger(__name__)


class DisplayColoring(str, Enum):
    SYSTEM = "system"
    DARK = "dark"
    LIGHT = "light"


class ShiftConvention(str, Enum):
    SHIFTED = "shifted"
    UNSHIFTED = "unshifted"


class MagScale(str, Enum):
    LINEAR = "linear"
    LOG = "log"


# field name -> enum type, used to coerce loaded values
_ENUM_FIELDS = {
    "coloring": DisplayColoring,
    "center": CenterConvention,
    "shift": ShiftConvention,
    "mag_scale": MagScale,
    "normalization": Normalization,
}


@dataclass(frozen=True)
class Settings:
    coloring: DisplayColoring = DisplayColoring.SYSTEM
    center: CenterConvention = CenterConvention.CENTER_PIXEL
    shift: ShiftConvention = ShiftConvention.SHIFTED
    mag_scale: MagScale = MagScale.LINEAR
    normalization: Normalization = Normalization.FORWARD

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """
        Merge a (possibly partial) mapping over the defaults.
        Unknown keys are ignored; invalid values keep the default.
        """
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            enum_type = _ENUM_FIELDS[f.name]
            try:
                values[f.name] = enum_type(data[f.name])
            except ValueError:
                logger.warning("Ignoring invalid setting %s=%r", f.name, data[f.name])
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        return {k: v.value for k, v in asdict(self).items()}

    def updated(self, **changes) -> "Settings":
        return Settings.from_dict({**self.to_dict(), **{k: getattr(v, "value", v) for k, v in changes.items()}})

    @property
    def apply_display_shift(self) -> bool:
        return self.shift is ShiftConvention.SHIFTED

    def make_request(self, samples: np.ndarray, size: int) -> TransformRequest:
        """Build a square transform request from a flat uint8 sample buffer."""
        return TransformRequest(
            width=size,
            height=size,
            samples=samples,
            apply_display_shift=self.apply_display_shift,
            normalization=self.normalization,
            origin_convention=self.center,
        )


DEFAULT_SETTINGS = Settings()
