"""
Posture thresholds for the pushup counter
Defaults can be overridden with named options or PUSHUP_* environment variables
"""

import os
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Optional

from pushtrack.pushups.rep_counter.errors import InvalidConfiguration

# Option name -> (field name, environment variable)
OPTION_NAMES = {
    "backStraightDeg": ("back_straight_deg", "PUSHUP_BACK_STRAIGHT_DEG"),
    "excellentBackDeg": ("excellent_back_deg", "PUSHUP_EXCELLENT_BACK_DEG"),
    "excellentElbowDeg": ("excellent_elbow_deg", "PUSHUP_EXCELLENT_ELBOW_DEG"),
    "downElbowDeg": ("down_elbow_deg", "PUSHUP_DOWN_ELBOW_DEG"),
    "upElbowDeg": ("up_elbow_deg", "PUSHUP_UP_ELBOW_DEG"),
    "minConfidence": ("min_confidence", "PUSHUP_MIN_CONFIDENCE"),
}


@dataclass(frozen=True)
class Thresholds:
    """Angle thresholds (degrees) and keypoint confidence cutoff."""
    back_straight_deg: float = 145.0
    excellent_back_deg: float = 165.0
    excellent_elbow_deg: float = 100.0
    down_elbow_deg: float = 110.0
    up_elbow_deg: float = 140.0
    min_confidence: float = 0.5

    def __post_init__(self):
        validate_thresholds(self)

    @classmethod
    def from_options(cls, options: Optional[Dict]) -> "Thresholds":
        """Builds thresholds from named options (backStraightDeg, upElbowDeg, ...)."""
        if not options:
            return cls()
        kwargs = {}
        for key, value in options.items():
            if key not in OPTION_NAMES:
                raise InvalidConfiguration(f"Unknown threshold option: {key}")
            if value is None:
                continue
            try:
                kwargs[OPTION_NAMES[key][0]] = float(value)
            except (TypeError, ValueError):
                raise InvalidConfiguration(f"Threshold option {key} must be a number, got {value!r}")
        return cls(**kwargs)

    def to_options(self) -> Dict[str, float]:
        values = asdict(self)
        return {option: values[field_name] for option, (field_name, _) in OPTION_NAMES.items()}


def validate_thresholds(thresholds: Thresholds) -> None:
    """Raises InvalidConfiguration when thresholds would make the phase machine oscillate or never count."""
    for option, (field_name, _) in OPTION_NAMES.items():
        value = getattr(thresholds, field_name)
        if field_name == "min_confidence":
            if not 0.0 <= value <= 1.0:
                raise InvalidConfiguration(f"{option} must be within [0, 1], got {value}")
        elif not 0.0 <= value <= 180.0:
            raise InvalidConfiguration(f"{option} must be within [0, 180] degrees, got {value}")

    if thresholds.down_elbow_deg >= thresholds.up_elbow_deg:
        raise InvalidConfiguration(
            f"downElbowDeg ({thresholds.down_elbow_deg}) must be lower than upElbowDeg ({thresholds.up_elbow_deg})"
        )
    if thresholds.back_straight_deg > thresholds.excellent_back_deg:
        raise InvalidConfiguration(
            f"backStraightDeg ({thresholds.back_straight_deg}) must not exceed excellentBackDeg ({thresholds.excellent_back_deg})"
        )


def load_thresholds_from_env() -> Thresholds:
    """Reads PUSHUP_* environment variables, falling back to defaults for unset ones."""
    options = {}
    for option, (_, env_name) in OPTION_NAMES.items():
        raw = os.environ.get(env_name)
        if raw is not None and raw.strip() != "":
            options[option] = raw
    thresholds = Thresholds.from_options(options)
    if options:
        logging.info(f"Pushup thresholds overridden from environment: {sorted(options)}")
    return thresholds
