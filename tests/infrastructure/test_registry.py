"""Tests for the registry metadata client."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
import requests

from tplctl.domain.errors import RegistryFetchError
from tplctl.infrastructure.registry import RegistryClient


class TestDistTagsUrl:
    def test_plain_name(self) -> None:
        client = RegistryClient("https://registry.example.com/")
        assert (
            client.dist_tags_url("cra-template")
            == "https://registry.example.com/-/package/cra-template/dist-tags"
        )

    def test_scoped_name_encodes_slash(self) -> None:
        client = RegistryClient()
        assert client.dist_tags_url("@acme/tpl").endswith("/-/package/@acme%2Ftpl/dist-tags")


class TestLatestVersion:
    def test_success(self, fake_session: Callable[..., Any]) -> None:
        session = fake_session(payload={"latest": "1.4.0", "next": "2.0.0-rc.1"})
        client = RegistryClient(session=session, timeout=3.0)
        assert client.latest_version("cra-template-x") == "1.4.0"
        assert session.calls[0]["timeout"] == 3.0

    def test_packument_shape(self, fake_session: Callable[..., Any]) -> None:
        session = fake_session(payload={"name": "x", "dist-tags": {"latest": "0.3.1"}})
        assert RegistryClient(session=session).latest_version("x") == "0.3.1"

    def test_http_error(self, fake_session: Callable[..., Any]) -> None:
        session = fake_session(status_code=500)
        with pytest.raises(RegistryFetchError) as exc_info:
            RegistryClient(session=session).latest_version("x")
        assert exc_info.value.detail["status"] == 500

    def test_connection_error(self, fake_session: Callable[..., Any]) -> None:
        session = fake_session(requests.ConnectionError("offline"))
        with pytest.raises(RegistryFetchError, match="offline"):
            RegistryClient(session=session).latest_version("x")

    def test_invalid_json(self, fake_session: Callable[..., Any]) -> None:
        session = fake_session(text="<html>")
        with pytest.raises(RegistryFetchError, match="invalid JSON"):
            RegistryClient(session=session).latest_version("x")

    def test_missing_latest(self, fake_session: Callable[..., Any]) -> None:
        session = fake_session(payload={"beta": "1.0.0"})
        with pytest.raises(RegistryFetchError, match="latest"):
            RegistryClient(session=session).latest_version("x")

    def test_non_object_body(self, fake_session: Callable[..., Any]) -> None:
        session = fake_session(payload=["1.0.0"])
        with pytest.raises(RegistryFetchError):
            RegistryClient(session=session).dist_tags("x")
