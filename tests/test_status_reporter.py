"""
Status reporter tests: configuration short-circuit and probe failure handling.
"""
import logging

import httpx
import pytest

from dvbviewer_tv.config import Settings
from dvbviewer_tv.errors import RecordingServiceResponseError, RecordingServiceUnavailableError
from dvbviewer_tv.schemas import LiveTvServiceStatus
from dvbviewer_tv.services.status_reporter import (
    CONNECTED_MESSAGE,
    UNAVAILABLE_MESSAGE,
    StatusReporter,
)


class TestStatusReporter:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"api_host": ""},
        {"api_host": "dvbviewer.local", "password": "secret"},
        {"api_host": "dvbviewer.local", "api_port": 7522, "streaming_port": 7522},
    ])
    async def test_invalid_configuration_skips_probe(self, fake_proxy, overrides):
        settings = Settings(_env_file=None, **overrides)
        reporter = StatusReporter(settings, fake_proxy, plugin_version="1.2.3")

        status = await reporter.get_status()

        assert status.status == LiveTvServiceStatus.UNAVAILABLE
        assert status.status_message == UNAVAILABLE_MESSAGE
        assert status.version == "DVBViewer Live TV Plugin V1.2.3"
        assert status.has_update_available is False
        assert fake_proxy.calls["get_status_info"] == 0

    @pytest.mark.asyncio
    async def test_successful_probe_reports_both_versions(self, settings, fake_proxy):
        reporter = StatusReporter(settings, fake_proxy, plugin_version="1.2.3")

        status = await reporter.get_status()

        assert status.status == LiveTvServiceStatus.OK
        assert status.status_message == CONNECTED_MESSAGE
        assert status.version == "DVBViewer Live TV Plugin V1.2.3 - 2.1.6.0"
        assert fake_proxy.calls["get_status_info"] == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        RecordingServiceUnavailableError("timeout"),
        RecordingServiceResponseError("malformed"),
        httpx.ConnectError("refused"),
        ValueError("unexpected"),
    ])
    async def test_failing_probe_is_logged_once(self, settings, fake_proxy, caplog, error):
        fake_proxy.status_error = error
        reporter = StatusReporter(settings, fake_proxy, plugin_version="1.2.3")

        with caplog.at_level(logging.ERROR, logger="dvbviewer_tv.services.status_reporter"):
            status = await reporter.get_status()

        assert status.status == LiveTvServiceStatus.UNAVAILABLE
        assert status.version == "DVBViewer Live TV Plugin V1.2.3"
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].exc_info is not None

    @pytest.mark.asyncio
    async def test_each_query_returns_a_fresh_status(self, settings, fake_proxy):
        reporter = StatusReporter(settings, fake_proxy)

        first = await reporter.get_status()
        second = await reporter.get_status()

        assert first == second
        assert first is not second
        assert fake_proxy.calls["get_status_info"] == 2
