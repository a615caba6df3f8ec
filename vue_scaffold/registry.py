"""
registry.py

Responsibility: Isolate all package-registry HTTP interaction.

This module must be the only place that:
- Constructs registry endpoints
- Sends HTTP requests to the registry
- Extracts the published version from a response

Lookups are best-effort: any failure yields an empty version string so a
scaffold run is never aborted by the network.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import quote

import requests

log = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"

_VERSION_RE = re.compile(rb'"version"\s*:\s*"([^"\s]+)"')


class RegistryClient:
    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        *,
        session: requests.Session | None = None,
        timeout: float = 30,
    ) -> None:
        self._registry_url = registry_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout
        self._cache: dict[str, str] = {}

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": "vue-scaffold",
        }

    def package_url(self, name: str) -> str:
        # Scoped names keep their `@` and encode the slash: @vue%2Ftsconfig
        return f"{self._registry_url}/{quote(name, safe='@')}/latest"

    def _fetch_version(self, name: str) -> str:
        url = self.package_url(name)
        buffer = b""
        with self._session.get(url, headers=self._headers(), stream=True, timeout=self._timeout) as r:
            if r.status_code >= 400:
                log.debug("Registry returned %s for %s", r.status_code, name)
                return ""
            for chunk in r.iter_content(chunk_size=1024):
                buffer += chunk
                match = _VERSION_RE.search(buffer)
                if match:
                    # Leaving the `with` block closes the connection without reading the rest.
                    return match.group(1).decode("utf-8")
        log.debug("No version field found for %s", name)
        return ""

    def latest_version(self, name: str) -> str:
        """
        Return the latest published version of `name`, or "" if it cannot be determined.

        Each distinct name is requested at most once per client.
        """
        if name in self._cache:
            return self._cache[name]
        try:
            version = self._fetch_version(name)
        except requests.RequestException as e:
            log.debug("Version lookup failed for %s: %s", name, e)
            version = ""
        self._cache[name] = version
        return version
