"""Space-Track.org TLE source.

Fetches current element sets from the Space-Track ``gp`` class and returns
them as :class:`~tletrack.core.tle.TLERecord` objects ready for the
position engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

logger = logging.getLogger(__name__)

from tletrack.core.tle import TLERecord, is_valid_tle, parse_tle_catalog
from tletrack.exceptions import InvalidTLEError


@dataclass
class SpaceTrackClient:
    """Client for the Space-Track.org REST API.

    Requires a Space-Track account. Register at https://www.space-track.org.

    Attributes:
        identity: Space-Track username/email.
        password: Space-Track password.
        timeout_s: Per-request timeout in seconds.
    """

    identity: str
    password: str = field(repr=False)
    timeout_s: float = 30.0
    _session: requests.Session = field(default_factory=requests.Session, repr=False)
    _authenticated: bool = field(default=False, repr=False)

    BASE_URL = "https://www.space-track.org"
    LOGIN_URL = f"{BASE_URL}/ajaxauth/login"

    def _login(self) -> None:
        """Authenticate and keep the session cookie.

        Raises:
            requests.HTTPError: If authentication fails.
        """
        response = self._session.post(
            self.LOGIN_URL,
            data={"identity": self.identity, "password": self.password},
            timeout=self.timeout_s,
        )
        response.raise_for_status()

        if "failed" in response.text.lower():
            logger.error("Space-Track authentication failed")
            raise requests.HTTPError(f"Space-Track authentication failed: {response.text}")

        logger.debug("Space-Track authentication successful")
        self._authenticated = True

    def _request(self, url: str) -> str:
        """GET an authenticated URL, logging in again once on HTTP 401.

        Raises:
            requests.HTTPError: If the request fails.
        """
        if not self._authenticated:
            self._login()

        response = self._session.get(url, timeout=self.timeout_s)

        if response.status_code == 401:
            logger.debug("Space-Track session expired, re-authenticating")
            self._authenticated = False
            self._login()
            response = self._session.get(url, timeout=self.timeout_s)

        response.raise_for_status()
        return response.text

    def fetch_tle(self, norad_id: int) -> TLERecord:
        """Fetch the latest TLE for a NORAD catalog number.

        Args:
            norad_id: NORAD catalog number.

        Returns:
            The latest element set for the object.

        Raises:
            ValueError: If no TLE is found for the given NORAD ID.
            InvalidTLEError: If the returned TLE fails checksum validation.
            requests.HTTPError: If the request fails.
        """
        url = (
            f"{self.BASE_URL}/basicspacedata/query/class/gp/"
            f"NORAD_CAT_ID/{norad_id}/orderby/EPOCH desc/limit/1/format/3le"
        )

        records = parse_tle_catalog(self._request(url))
        if not records:
            raise ValueError(f"No TLE found for NORAD ID {norad_id}")

        record = records[0]
        if record.name.startswith("0 "):
            record = TLERecord.from_lines(record.line1, record.line2, name=record.name[2:])
        if not is_valid_tle(record):
            raise InvalidTLEError(f"Space-Track returned an invalid TLE for NORAD ID {norad_id}")
        return record

    def fetch_catalog(
        self, *, epoch: str = ">now-30", decay_date: str = "null-val"
    ) -> list[TLERecord]:
        """Fetch a catalog of TLEs.

        Records failing checksum validation are dropped with a warning.

        Args:
            epoch: Epoch filter (e.g., ">now-30" for TLEs within last 30 days).
            decay_date: Decay date filter ("null-val" for active satellites).

        Returns:
            List of TLE records.

        Raises:
            requests.HTTPError: If the request fails.
        """
        url = (
            f"{self.BASE_URL}/basicspacedata/query/class/gp/"
            f"EPOCH/{epoch}/DECAY_DATE/{decay_date}/"
            f"orderby/NORAD_CAT_ID/format/tle"
        )

        response_text = self._request(url)
        if not response_text.strip():
            return []

        records = []
        for record in parse_tle_catalog(response_text):
            if is_valid_tle(record):
                records.append(record)
            else:
                logger.warning("Dropping TLE with bad checksum: %s", record.line1)

        logger.info("Fetched %d TLEs from Space-Track", len(records))
        return records
