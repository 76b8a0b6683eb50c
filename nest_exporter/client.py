# nest_exporter - Nest REST API Client
# -*- coding: utf-8 -*-
"""
 Nest REST API Client

 Fetches the /devices document from the Nest developer API using an
 access token obtained with the one-time PIN authorization flow
 (python -m nest_exporter token).

 Class:
    NestAPI - Nest REST API client

 Functions:
    fetch_devices() - return the raw /devices JSON document
    get_thermostats() - return the thermostats as Thermostat snapshots
    close() - close the http session
    authorization_url(client_id) - URL to open in a browser to get a PIN code
    request_access_token(client_id, client_secret, code) - exchange PIN for token

 Nest asks clients to store and re-use the redirected location of the API
 so the client caches the final URL after the first redirect.
 See https://developers.nest.com/documentation/cloud/how-to-handle-redirects
"""
import logging
import urllib.parse
from typing import Optional, Tuple

import requests

from nest_exporter import __version__
from nest_exporter.exceptions import NestAPIError
from nest_exporter.models import Thermostat, parse_devices

API_URL = "https://developer-api.nest.com/devices.json"
AUTH_URL = "https://home.nest.com/login/oauth2"
TOKEN_URL = "https://api.home.nest.com/oauth2/access_token"
API_TIMEOUT = 10  # Time in seconds to wait for Nest API response
AUTH_MODES = ("query", "bearer")
REDIRECT_CODES = (301, 302, 303, 307, 308)
MAX_REDIRECTS = 5

log = logging.getLogger(__name__)


class NestAPI:
    def __init__(self, token: str, timeout: float = API_TIMEOUT, auth_mode: str = "query",
                 url: str = API_URL):
        if auth_mode not in AUTH_MODES:
            raise ValueError(f"Invalid auth_mode {auth_mode!r} - must be query or bearer")
        self.token = token
        self.timeout = timeout
        self.auth_mode = auth_mode
        self.url = url
        self.redirect_url = None  # cached location after a Nest redirect
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": f"nest_exporter/{__version__}",
        })

    def _request_args(self) -> Tuple[str, dict]:
        headers = {}
        if self.auth_mode == "bearer":
            headers["Authorization"] = "Bearer " + self.token
        if self.redirect_url:
            return self.redirect_url, headers
        if self.auth_mode == "query":
            return f"{self.url}?{urllib.parse.urlencode({'auth': self.token})}", headers
        return self.url, headers

    def _get(self, url: str, headers: dict, allow_redirects: bool = True):
        try:
            return self.session.get(url, headers=headers, timeout=self.timeout,
                                    allow_redirects=allow_redirects)
        except requests.exceptions.Timeout as exc:
            self.redirect_url = None
            raise NestAPIError(f"Timeout waiting for Nest API: {exc}") from exc
        except requests.exceptions.RequestException as exc:
            self.redirect_url = None
            raise NestAPIError(f"Unable to connect to Nest API: {exc}") from exc

    def fetch_devices(self) -> dict:
        url, headers = self._request_args()
        log.debug(f"GET: {self.url} (cached redirect: {bool(self.redirect_url)})")
        if self.auth_mode == "bearer":
            # requests drops the Authorization header on a cross-host
            # redirect, so follow Nest redirects here and resend it
            response = self._get(url, headers, allow_redirects=False)
            redirects = 0
            while response.status_code in REDIRECT_CODES and redirects < MAX_REDIRECTS:
                location = response.headers.get("Location")
                if not location:
                    break
                url = urllib.parse.urljoin(url, location)
                log.debug("Nest API redirected - caching new location")
                self.redirect_url = url
                response = self._get(url, headers, allow_redirects=False)
                redirects += 1
        else:
            response = self._get(url, headers)
            if response.url and response.url != url:
                # Redirected - keep using the new location
                log.debug("Nest API redirected - caching new location")
                self.redirect_url = response.url

        if response.status_code != 200:
            self.redirect_url = None
            raise NestAPIError(f"HTTP code {response.status_code}: {response.text}",
                               status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise NestAPIError(f"Unable to decode Nest API response: {exc}") from exc

    def get_thermostats(self) -> Tuple[Thermostat, ...]:
        payload = self.fetch_devices()
        try:
            return parse_devices(payload)
        except (TypeError, ValueError) as exc:
            raise NestAPIError(f"Unable to decode Nest devices: {exc}") from exc

    def close(self):
        self.session.close()


def authorization_url(client_id: str, state: str = "STATE") -> str:
    """Return the URL the user opens to authorize the client and get a PIN code"""
    return f"{AUTH_URL}?{urllib.parse.urlencode({'client_id': client_id, 'state': state})}"


def request_access_token(client_id: str, client_secret: str, code: str,
                         timeout: float = API_TIMEOUT) -> str:
    """Exchange a PIN code for an access token"""
    data = {
        'client_id': client_id,
        'client_secret': client_secret,
        'code': code,
        'grant_type': 'authorization_code',
    }
    try:
        response = requests.post(TOKEN_URL, data=data, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        raise NestAPIError(f"Unable to connect to Nest auth server: {exc}") from exc
    if response.status_code != 200:
        raise NestAPIError(f"HTTP code {response.status_code}: {response.text}",
                           status_code=response.status_code)
    try:
        payload = response.json()
    except ValueError as exc:
        raise NestAPIError(f"Unable to decode token response: {exc}") from exc
    token: Optional[str] = payload.get('access_token') if isinstance(payload, dict) else None
    if not token:
        raise NestAPIError("No access_token in token response")
    return token
