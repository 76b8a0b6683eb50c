"""
 Metrics store for the Nest exporter

 NestMetrics owns a private prometheus_client registry with six gauge
 families. The poller replaces the whole snapshot with update() and the
 HTTP server reads it with render(); both hold the same lock so a scrape
 sees either the previous poll or the new one, never a mix.

    nest_state{thermostat, property}        1/0 booleans
    nest_temperature{thermostat}            ambient temperature
    nest_target_temperature{thermostat, type}
    nest_humidity{thermostat}
    nest_hvac_mode{thermostat, mode}        only the current mode is present
    nest_hvac_state{thermostat, state}      only the current state is present
"""
import logging
import threading
from typing import Iterable, Tuple

from prometheus_client import CollectorRegistry, Gauge, generate_latest, CONTENT_TYPE_LATEST

from nest_exporter.models import Thermostat, SCALES

log = logging.getLogger(__name__)

STATE_PROPERTIES = (
    'is_online',
    'can_cool',
    'can_heat',
    'is_using_emergency_heat',
    'has_fan',
    'fan_timer_active',
    'has_leaf',
)

# hvac_mode -> target temperature series; eco reports the away thresholds
TARGET_TEMPERATURES = {
    'heat': ('target_temperature',),
    'cool': ('target_temperature',),
    'heat-cool': ('target_temperature_high', 'target_temperature_low'),
    'eco': ('away_temperature_high', 'away_temperature_low'),
}


class NestMetrics:
    def __init__(self, namespace: str = "nest", scale: str = "F"):
        scale = scale.upper()
        if scale not in SCALES:
            raise ValueError(f"Invalid temperature scale {scale!r} - must be F or C")
        self.scale = scale
        self.registry = CollectorRegistry()
        self._lock = threading.Lock()

        self.state = Gauge('state', 'Various true/false (1/0) metrics describing nest state',
                           ['thermostat', 'property'], namespace=namespace, registry=self.registry)
        self.temperature = Gauge('temperature', f'The ambient temperature in {scale}',
                                 ['thermostat'], namespace=namespace, registry=self.registry)
        self.target_temperature = Gauge('target_temperature', f'The target temperatures in {scale}',
                                        ['thermostat', 'type'], namespace=namespace, registry=self.registry)
        self.humidity = Gauge('humidity', 'Current humidity in %',
                              ['thermostat'], namespace=namespace, registry=self.registry)
        # heat, cool, heat-cool, eco, off
        self.hvac_mode = Gauge('hvac_mode', 'HVAC mode',
                               ['thermostat', 'mode'], namespace=namespace, registry=self.registry)
        # heating, cooling, off
        self.hvac_state = Gauge('hvac_state', 'HVAC state',
                                ['thermostat', 'state'], namespace=namespace, registry=self.registry)
        self._families = (self.state, self.temperature, self.target_temperature,
                          self.humidity, self.hvac_mode, self.hvac_state)

    def update(self, thermostats: Iterable[Thermostat]):
        """Replace every published series with the given snapshot"""
        with self._lock:
            for family in self._families:
                family.clear()
            count = 0
            for thermostat in thermostats:
                self.publish(thermostat)
                count += 1
        log.debug(f"Published metrics for {count} thermostat(s)")

    def publish(self, t: Thermostat):
        # Caller holds the lock and has cleared previous values
        for prop in STATE_PROPERTIES:
            self.state.labels(thermostat=t.name, property=prop).set(1 if getattr(t, prop) else 0)

        self.temperature.labels(thermostat=t.name).set(t.temperature('ambient_temperature', self.scale))
        self.humidity.labels(thermostat=t.name).set(t.humidity)

        for kind in TARGET_TEMPERATURES.get(t.hvac_mode, ()):
            self.target_temperature.labels(thermostat=t.name, type=kind).set(
                t.temperature(kind, self.scale))

        # The hvac mode and state are a single series labelled with the
        # current value; other modes/states are not present.
        self.hvac_mode.labels(thermostat=t.name, mode=t.hvac_mode).set(1)
        self.hvac_state.labels(thermostat=t.name, state=t.hvac_state).set(1)

    def render(self) -> Tuple[bytes, str]:
        """Return the text exposition of the current snapshot and its content type"""
        with self._lock:
            return generate_latest(self.registry), CONTENT_TYPE_LATEST
