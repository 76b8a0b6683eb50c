"""
 Nest device snapshot

 A Thermostat is built from one entry of the "thermostats" category of the
 Nest /devices document. Decoding is best-effort: missing or null keys get
 zero values, but a value of the wrong JSON type fails the whole document.
"""
import logging
from dataclasses import dataclass, fields
from typing import Any, Tuple

log = logging.getLogger(__name__)

SCALES = ("F", "C")


def _coerce(name: str, kind: type, value: Any) -> Any:
    if value is None:
        return kind()
    if kind is bool:
        if not isinstance(value, bool):
            raise TypeError(f"{name}: expected boolean, got {value!r}")
        return value
    if kind is float:
        # bool is an int subclass, reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"{name}: expected number, got {value!r}")
        return float(value)
    if not isinstance(value, str):
        raise TypeError(f"{name}: expected string, got {value!r}")
    return value


@dataclass(frozen=True)
class Thermostat:
    name: str = ""
    device_id: str = ""
    name_long: str = ""
    label: str = ""
    where_id: str = ""
    where_name: str = ""
    structure_id: str = ""
    locale: str = ""
    software_version: str = ""
    temperature_scale: str = ""
    last_connection: str = ""

    is_online: bool = False
    can_cool: bool = False
    can_heat: bool = False
    is_using_emergency_heat: bool = False
    has_fan: bool = False
    fan_timer_active: bool = False
    has_leaf: bool = False
    is_locked: bool = False
    sunlight_correction_active: bool = False
    sunlight_correction_enabled: bool = False

    hvac_mode: str = ""
    previous_hvac_mode: str = ""
    hvac_state: str = ""
    fan_timer_timeout: str = ""
    fan_timer_duration: float = 0.0
    time_to_target: str = ""
    time_to_target_training: str = ""

    humidity: float = 0.0
    ambient_temperature_f: float = 0.0
    ambient_temperature_c: float = 0.0
    target_temperature_f: float = 0.0
    target_temperature_c: float = 0.0
    target_temperature_high_f: float = 0.0
    target_temperature_high_c: float = 0.0
    target_temperature_low_f: float = 0.0
    target_temperature_low_c: float = 0.0
    away_temperature_high_f: float = 0.0
    away_temperature_high_c: float = 0.0
    away_temperature_low_f: float = 0.0
    away_temperature_low_c: float = 0.0
    eco_temperature_high_f: float = 0.0
    eco_temperature_high_c: float = 0.0
    eco_temperature_low_f: float = 0.0
    eco_temperature_low_c: float = 0.0
    locked_temp_min_f: float = 0.0
    locked_temp_min_c: float = 0.0
    locked_temp_max_f: float = 0.0
    locked_temp_max_c: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "Thermostat":
        """
        Build a Thermostat from a Nest API thermostat object.

        Unknown keys are ignored. Raises TypeError when a known key holds
        a value of the wrong type.
        """
        if not isinstance(data, dict):
            raise TypeError(f"thermostat: expected object, got {type(data).__name__}")
        values = {}
        for f in fields(cls):
            if f.name in data:
                values[f.name] = _coerce(f.name, f.type, data[f.name])
        return cls(**values)

    def temperature(self, kind: str, scale: str = "F") -> float:
        """Return the <kind>_f or <kind>_c reading, e.g. temperature("away_temperature_high", "C")"""
        scale = scale.upper()
        if scale not in SCALES:
            raise ValueError(f"Invalid temperature scale {scale!r} - must be F or C")
        return getattr(self, f"{kind}_{scale.lower()}")


def parse_devices(payload: Any) -> Tuple[Thermostat, ...]:
    """
    Return the thermostats in a Nest /devices document, ordered by device id.

        {"thermostats": {"<device_id>": {...}, ...}, "smoke_co_alarms": {...}}
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected devices payload: {type(payload).__name__}")
    thermostats = payload.get("thermostats") or {}
    if not isinstance(thermostats, dict):
        raise ValueError(f"Unexpected thermostats payload: {type(thermostats).__name__}")
    devices = tuple(Thermostat.from_dict(thermostats[key]) for key in sorted(thermostats))
    log.debug(f"Decoded {len(devices)} thermostat(s)")
    return devices
