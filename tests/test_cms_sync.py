"""Tests for the CMS mirror client and its background hand-off."""

from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import List
from unittest.mock import MagicMock

import pytest
import requests

from mandir_forms import extensions

from mandir_forms.models import PujaSponsorship
from mandir_forms.services.cms_sync import CmsClient, sync_in_background


def _response(status: int, text: str = "") -> MagicMock:
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status
    resp.text = text
    return resp


class TestCmsClient:
    """CmsClient.create outcomes."""

    def test_skips_without_token(self, caplog) -> None:
        session = MagicMock()
        client = CmsClient(base_url="http://cms.test/api", token="", session=session)

        assert client.create("puja-sponsorships", {"transactionId": "req_x"}) is False
        session.post.assert_not_called()
        assert "skipping CMS sync" in caplog.text

    def test_posts_data_envelope_with_bearer(self) -> None:
        session = MagicMock()
        session.post.return_value = _response(201)
        client = CmsClient(base_url="http://cms.test/api", token="tok", session=session)

        assert client.create("facility-requests", {"transactionId": "req_x"}) is True
        session.post.assert_called_once_with(
            "http://cms.test/api/facility-requests",
            json={"data": {"transactionId": "req_x"}},
            headers={"Content-Type": "application/json", "Authorization": "Bearer tok"},
            timeout=10.0,
        )

    def test_non_2xx_returns_false(self, caplog, events) -> None:
        session = MagicMock()
        session.post.return_value = _response(400, '{"error":{"message":"bad"}}')
        client = CmsClient(base_url="http://cms.test/api", token="tok", session=session)

        assert client.create("form-submissions", {"transactionId": "req_x"}) is False
        assert "400" in caplog.text
        assert events[-1]["name"] == "cms_sync_failed"

    def test_network_error_returns_false(self) -> None:
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")
        client = CmsClient(base_url="http://cms.test/api", token="tok", session=session)

        assert client.create("form-submissions", {"transactionId": "req_x"}) is False

    def test_from_app_reads_config(self, app) -> None:
        app.config.update(CMS_API_URL="https://cms.example.org/api/", CMS_API_TOKEN="tok", CMS_SYNC_TIMEOUT=4)
        client = CmsClient.from_app(app)

        assert client.base_url == "https://cms.example.org/api"
        assert client.configured
        assert client.timeout == 4.0


class TestBackgroundSync:
    """sync_in_background and the submission pipeline."""

    def test_unexpected_error_becomes_false(self, inline_bg) -> None:
        client = MagicMock(spec=CmsClient)
        client.create.side_effect = ValueError("boom")

        fut = sync_in_background(client, "puja-sponsorships", {"transactionId": "req_x"})

        assert fut.result() is False

    def test_submission_mirrors_row(self, app, client, sponsorship_payload, inline_bg, monkeypatch) -> None:
        app.config["CMS_API_TOKEN"] = "tok"
        post = MagicMock(return_value=_response(200))
        monkeypatch.setattr("mandir_forms.services.cms_sync.requests.post", post)

        resp = client.post("/api/v1/forms/sponsorship", json=sponsorship_payload)

        assert resp.status_code == 201
        row = PujaSponsorship.query.one()
        url = post.call_args.args[0]
        sent = post.call_args.kwargs["json"]["data"]
        assert url == "http://cms.test/api/puja-sponsorships"
        assert sent["transactionId"] == row.transaction_id
        assert sent["postgresId"] == str(row.id)
        assert sent["requestedDate"] == "2026-11-14"
        assert inline_bg[-1].result() is True

    def test_cms_outage_still_succeeds(self, app, client, sponsorship_payload, monkeypatch) -> None:
        app.config["CMS_API_TOKEN"] = "tok"
        monkeypatch.setattr(
            "mandir_forms.services.cms_sync.requests.post",
            MagicMock(side_effect=requests.Timeout("timed out")),
        )

        resp = client.post("/api/v1/forms/sponsorship", json=sponsorship_payload)

        assert resp.status_code == 201
        assert PujaSponsorship.query.count() == 1

    @pytest.mark.real_executor
    def test_response_does_not_wait_for_cms(self, app, client, sponsorship_payload, monkeypatch) -> None:
        app.config["CMS_API_TOKEN"] = "tok"
        release = threading.Event()

        def slow_post(*args, **kwargs):
            release.wait(timeout=10)
            return _response(200)

        futures: List[Future] = []

        def tracked_run_bg(func, *args, **kwargs) -> Future:
            fut = extensions.run_bg(func, *args, **kwargs)
            futures.append(fut)
            return fut

        monkeypatch.setattr("mandir_forms.services.cms_sync.requests.post", slow_post)
        monkeypatch.setattr("mandir_forms.services.cms_sync.run_bg", tracked_run_bg)

        try:
            resp = client.post("/api/v1/forms/sponsorship", json=sponsorship_payload)

            assert resp.status_code == 201
            assert len(futures) == 1
            assert not futures[0].done()
        finally:
            release.set()

        assert futures[0].result(timeout=5) is True
