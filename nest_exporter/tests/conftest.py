"""Pytest configuration and fixtures."""
import copy

import pytest
from prometheus_client.parser import text_string_to_metric_families

from nest_exporter.metrics import NestMetrics

DEVICES = {
    "thermostats": {
        "peyiJNo0IldT2YlIVtYaGQ": {
            "device_id": "peyiJNo0IldT2YlIVtYaGQ",
            "name": "Hallway",
            "name_long": "Hallway Thermostat",
            "where_name": "Hallway",
            "locale": "en-US",
            "software_version": "5.6.1",
            "temperature_scale": "F",
            "is_online": True,
            "can_cool": True,
            "can_heat": True,
            "is_using_emergency_heat": False,
            "has_fan": True,
            "fan_timer_active": False,
            "has_leaf": True,
            "humidity": 40,
            "ambient_temperature_f": 70,
            "ambient_temperature_c": 21.5,
            "target_temperature_f": 71,
            "target_temperature_c": 21.5,
            "target_temperature_high_f": 72,
            "target_temperature_high_c": 22.0,
            "target_temperature_low_f": 68,
            "target_temperature_low_c": 20.0,
            "away_temperature_high_f": 80,
            "away_temperature_high_c": 26.5,
            "away_temperature_low_f": 62,
            "away_temperature_low_c": 16.5,
            "hvac_mode": "heat-cool",
            "previous_hvac_mode": "heat",
            "hvac_state": "off",
            "last_connection": "2016-10-31T23:59:59.000Z",
        },
        "VG7C7BU5Bnl5fTnf0PEsLQ": {
            "device_id": "VG7C7BU5Bnl5fTnf0PEsLQ",
            "name": "Den",
            "is_online": False,
            "can_cool": False,
            "can_heat": True,
            "has_fan": False,
            "has_leaf": False,
            "humidity": 55.5,
            "ambient_temperature_f": 64,
            "ambient_temperature_c": 18.0,
            "target_temperature_f": 66,
            "target_temperature_c": 19.0,
            "away_temperature_high_f": 79,
            "away_temperature_low_f": 60,
            "hvac_mode": "heat",
            "hvac_state": "heating",
        },
    },
    "smoke_co_alarms": {
        "RTMTKxsQTCxzVcsySOHPxKoF4OyCifrs": {"name": "Kitchen", "battery_health": "ok"}
    },
}


@pytest.fixture
def devices_payload():
    """Sample Nest /devices document with two thermostats."""
    return copy.deepcopy(DEVICES)


@pytest.fixture
def metrics():
    return NestMetrics()


def sample(metrics, name, **labels):
    """Return the current value of a series or None if it is not published."""
    return metrics.registry.get_sample_value(name, labels)


def scraped_value(text, name, **labels):
    """Return the value of a series in scraped exposition text or None."""
    for family in text_string_to_metric_families(text):
        for s in family.samples:
            if s.name == name and s.labels == labels:
                return s.value
    return None
