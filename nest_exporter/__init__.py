# nest_exporter Module
# -*- coding: utf-8 -*-
"""
 Python module to export Nest thermostat data as Prometheus metrics

 Features
    * Polls the Nest cloud REST API on a fixed interval (default 120s)
    * Converts thermostat state, temperatures, humidity and HVAC mode/state
      into Prometheus gauges
    * Replaces the whole snapshot atomically so scrapes never see a mix
      of two polls
    * Re-uses the redirected Nest API location as Nest requests
    * Serves /metrics for Prometheus (/ redirects to /metrics)

 Classes
    NestAPI(token, timeout, auth_mode, url)         # Nest REST API client
    NestMetrics(namespace, scale)                   # Metrics store for scrape
    Poller(client, metrics, interval)               # Background poll loop
    Thermostat                                      # Device snapshot

 Functions
    set_debug(toggle)         # Enable verbose logging
    load_config(path)         # Load TOML configuration file
    serve(address, metrics)   # Run the metrics HTTP server

 Usage
    python -m nest_exporter -config ~/.nest_exporter.toml -listen-address :9264

 Requirements
    This module requires the following modules: requests, prometheus_client, python-dotenv
    pip install requests prometheus_client python-dotenv
"""
import logging
import sys

version_tuple = (0, 1, 0)
version = __version__ = '%d.%d.%d' % version_tuple

from nest_exporter.exceptions import NestExporterError, NestAPIError, NestExporterConfigError
from nest_exporter.models import Thermostat, parse_devices
from nest_exporter.client import NestAPI
from nest_exporter.metrics import NestMetrics
from nest_exporter.poller import Poller, DEFAULT_REFRESH_INTERVAL
from nest_exporter.config import Config, load_config
from nest_exporter.server import serve, parse_listen_address

log = logging.getLogger(__name__)
log.debug('%s version %s', __name__, __version__)
log.debug('Python %s on %s', sys.version, sys.platform)


def set_debug(toggle=True):
    """Enable verbose logging"""
    if toggle:
        logging.basicConfig(format='%(levelname)s:%(message)s', level=logging.DEBUG)
        log.setLevel(logging.DEBUG)
        log.debug("%s [%s]\n" % (__name__, __version__))
    else:
        log.setLevel(logging.NOTSET)
