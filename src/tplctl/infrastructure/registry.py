"""Package registry metadata client (requests-based).

Only the dist-tags endpoint is used: ``GET {registry}/-/package/{name}/dist-tags``
answers ``{"latest": "x.y.z", ...}``. Every failure mode surfaces as
:class:`RegistryFetchError`; callers decide whether that is fatal.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from tplctl.domain.errors import RegistryFetchError

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"


class RegistryClient:
    """Thin wrapper over a :class:`requests.Session` for registry lookups."""

    def __init__(
        self,
        base_url: str = DEFAULT_REGISTRY_URL,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def dist_tags_url(self, name: str) -> str:
        # Scoped names keep "@" but encode the slash: @scope%2Fname
        return f"{self._base_url}/-/package/{quote(name, safe='@')}/dist-tags"

    def _get_json(self, url: str) -> Any:
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise RegistryFetchError(f"Registry request failed: {exc}", url=url) from exc

        if response.status_code != 200:
            raise RegistryFetchError(
                f"Registry returned HTTP {response.status_code}",
                url=url,
                status=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise RegistryFetchError(f"Registry returned invalid JSON: {exc}", url=url) from exc

    def dist_tags(self, name: str) -> dict[str, str]:
        """Return the dist-tags map for *name*.

        Accepts both the dist-tags document and a full packument carrying a
        ``dist-tags`` object.
        """
        url = self.dist_tags_url(name)
        body = self._get_json(url)
        if isinstance(body, dict) and isinstance(body.get("dist-tags"), dict):
            body = body["dist-tags"]
        if not isinstance(body, dict):
            raise RegistryFetchError("Registry response is not a JSON object", url=url)
        logger.debug("Fetched dist-tags for %s", name)
        return {str(k): str(v) for k, v in body.items()}

    def latest_version(self, name: str) -> str:
        """The ``latest`` dist-tag of *name*."""
        tags = self.dist_tags(name)
        latest = tags.get("latest")
        if not latest:
            raise RegistryFetchError(f"No 'latest' tag published for {name}", name=name)
        return latest
