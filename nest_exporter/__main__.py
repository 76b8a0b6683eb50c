# nest_exporter Module - Command Line
# -*- coding: utf-8 -*-
"""
 Nest Prometheus Exporter

 Usage:
    python -m nest_exporter [-listen-address :9264] [-config ~/.nest_exporter.toml] [-debug] [command]

 Commands:
    serve   - Poll the Nest API and serve /metrics (default)
    token   - One-time PIN authorization to create an access token
    version - Print version information

"""
import argparse
import logging
import signal
import sys

import dotenv

from nest_exporter import version, set_debug
from nest_exporter.client import NestAPI, authorization_url, request_access_token
from nest_exporter.config import CONFIGFILE, load_config
from nest_exporter.exceptions import NestExporterError, NestExporterConfigError
from nest_exporter.metrics import NestMetrics
from nest_exporter.poller import Poller
from nest_exporter.server import serve, parse_listen_address

LISTEN_ADDRESS = ":9264"

log = logging.getLogger("nest_exporter")


# noinspection PyUnusedLocal
def sig_term_handle(signum, frame):
    raise SystemExit


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="nest_exporter", description=f"Nest Prometheus Exporter v{version}")
    p.add_argument("command", nargs="?", default="serve", choices=["serve", "token", "version"],
                   help="serve (default), token or version")
    p.add_argument("-listen-address", dest="listen_address", type=str, default=LISTEN_ADDRESS,
                   help=f"The address to listen on for HTTP requests. [Default={LISTEN_ADDRESS}]")
    p.add_argument("-config", type=str, default=CONFIGFILE,
                   help=f"Path to the configuration file. [Default={CONFIGFILE}]")
    p.add_argument("-debug", action="store_true", default=False, help="Enable debug output")
    return p


def run_exporter(args) -> int:
    config = load_config(args.config)
    config.validate()
    parse_listen_address(args.listen_address)

    metrics = NestMetrics(scale=config.temperature_scale)
    client = NestAPI(config.token, timeout=config.timeout, auth_mode=config.auth_mode)
    poller = Poller(client, metrics, interval=config.refresh_interval)

    log.info(f"Nest Exporter [{version}] - {config.temperature_scale} scale, "
             f"refresh every {poller.interval}s")
    poller.start()
    try:
        serve(args.listen_address, metrics)
    finally:
        poller.stop()
        client.close()
        log.info("Nest Exporter Stopped")
    return 0


def run_token(args) -> int:
    config = load_config(args.config, required=False)
    client_id = config.client_id or input("Enter Nest OAuth client ID: ").strip()
    client_secret = config.client_secret or input("Enter Nest OAuth client secret: ").strip()
    print("Nest Exporter [%s] - Access Token Setup\n" % version)
    print("Open this URL in your browser and authorize access:\n")
    print(f"  {authorization_url(client_id)}\n")
    code = input("Enter code given to you by nest: ").strip()
    token = request_access_token(client_id, client_secret, code, timeout=config.timeout)
    print(f"\nAccess token (add to {config.path} as token = \"...\"):\n")
    print(token)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(format='%(levelname)s:%(message)s', level=logging.INFO)
    if args.debug:
        set_debug(True)

    if args.command == "version":
        print("nest_exporter [%s]" % version)
        return 0

    # Load environment variables from .env file if present
    dotenv.load_dotenv()
    signal.signal(signal.SIGTERM, sig_term_handle)

    try:
        if args.command == "token":
            return run_token(args)
        return run_exporter(args)
    except NestExporterConfigError as exc:
        log.error(f"Fatal Error: {exc}")
        return 1
    except NestExporterError as exc:
        log.error(exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
