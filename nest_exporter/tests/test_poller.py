"""Tests for the poll loop."""
import time
from unittest.mock import Mock

import pytest

from nest_exporter.exceptions import NestAPIError
from nest_exporter.models import Thermostat, parse_devices
from nest_exporter.poller import Poller, DEFAULT_REFRESH_INTERVAL
from nest_exporter.tests.conftest import sample


@pytest.mark.parametrize("interval", [None, 0, -5])
def test_default_interval(interval, metrics):
    poller = Poller(Mock(), metrics, interval=interval)
    assert poller.interval == DEFAULT_REFRESH_INTERVAL == 120


def test_configured_interval(metrics):
    assert Poller(Mock(), metrics, interval=30).interval == 30


def test_poll_once_publishes(metrics, devices_payload):
    client = Mock()
    client.get_thermostats.return_value = parse_devices(devices_payload)
    poller = Poller(client, metrics)

    assert poller.poll_once() is True
    assert poller.polls == 1
    assert sample(metrics, 'nest_hvac_mode', thermostat='Hallway', mode='heat-cool') == 1


def test_fetch_error_leaves_metrics_unchanged(metrics, devices_payload):
    client = Mock()
    client.get_thermostats.return_value = parse_devices(devices_payload)
    poller = Poller(client, metrics)
    poller.poll_once()
    before = metrics.render()[0]

    client.get_thermostats.side_effect = NestAPIError("HTTP code 503: unavailable", status_code=503)
    assert poller.poll_once() is False
    assert poller.errors == 1
    assert metrics.render()[0] == before


def test_fetch_error_does_not_touch_store():
    client = Mock()
    client.get_thermostats.side_effect = NestAPIError("Unable to connect to Nest API")
    store = Mock()
    Poller(client, store).poll_once()
    store.update.assert_not_called()


def test_fetch_error_is_logged(metrics, caplog):
    client = Mock()
    client.get_thermostats.side_effect = NestAPIError("Timeout waiting for Nest API")
    Poller(client, metrics).poll_once()
    assert "Timeout waiting for Nest API" in caplog.text


def test_start_polls_immediately_and_stop(metrics):
    client = Mock()
    client.get_thermostats.return_value = (Thermostat(name="Den", hvac_mode="heat"),)
    poller = Poller(client, metrics, interval=60)
    poller.start()
    try:
        deadline = time.time() + 5
        while poller.polls == 0 and time.time() < deadline:
            time.sleep(0.01)
    finally:
        poller.stop()
    assert poller.polls == 1
    assert sample(metrics, 'nest_hvac_mode', thermostat='Den', mode='heat') == 1
    assert poller._thread is None


def test_loop_continues_after_error(metrics):
    client = Mock()
    responses = [NestAPIError("HTTP code 500: error")]

    def get_thermostats():
        if responses:
            raise responses.pop()
        return (Thermostat(name="Den", hvac_mode="cool"),)

    client.get_thermostats.side_effect = get_thermostats
    poller = Poller(client, metrics, interval=0.01)
    poller.start()
    try:
        deadline = time.time() + 5
        while poller.polls == 0 and time.time() < deadline:
            time.sleep(0.01)
    finally:
        poller.stop()
    assert poller.errors == 1
    assert poller.polls >= 1
