"""Tests for the on-demand condition check endpoint."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from starlette.datastructures import Headers

from plantwatch.lib.exceptions import DatabaseError
from plantwatch.lib.models import Alert
from plantwatch.server.api.conditions import check_conditions
from plantwatch.server.entrypoint import create_app


def _make_request(scanner, headers=None):
    """Create a mock Starlette request carrying the given headers."""
    request = MagicMock()
    request.headers = Headers(headers or {})
    request.app.state.scanner = scanner
    return request


@pytest.fixture
def mock_scanner():
    scanner = MagicMock()
    scanner.check_tenant = AsyncMock(return_value=[])
    return scanner


class TestCheckConditions:
    """Tests for check_conditions endpoint."""

    async def test_missing_header_rejected(self, mock_scanner):
        response = await check_conditions(_make_request(mock_scanner))

        assert response.status_code == 400
        assert json.loads(response.body) == {"error": "Missing clientId header"}
        mock_scanner.check_tenant.assert_not_called()

    async def test_blank_header_rejected(self, mock_scanner):
        response = await check_conditions(
            _make_request(mock_scanner, {"clientId": "  "})
        )

        assert response.status_code == 400

    async def test_returns_alerts_for_tenant(self, mock_scanner):
        mock_scanner.check_tenant.return_value = [
            Alert(1, "Monty", "It's too hot for Monty!"),
            Alert(1, "Monty", "Monty's soil is too dry!"),
        ]

        response = await check_conditions(
            _make_request(mock_scanner, {"clientId": "alice"})
        )

        assert response.status_code == 200
        mock_scanner.check_tenant.assert_awaited_once_with("alice")
        assert json.loads(response.body) == [
            {"plantId": 1, "plantName": "Monty", "message": "It's too hot for Monty!"},
            {"plantId": 1, "plantName": "Monty", "message": "Monty's soil is too dry!"},
        ]

    async def test_header_lookup_is_case_insensitive(self, mock_scanner):
        await check_conditions(_make_request(mock_scanner, {"clientid": "bob"}))

        mock_scanner.check_tenant.assert_awaited_once_with("bob")

    async def test_no_alerts_returns_empty_list(self, mock_scanner):
        response = await check_conditions(
            _make_request(mock_scanner, {"clientId": "alice"})
        )

        assert response.status_code == 200
        assert json.loads(response.body) == []

    async def test_data_failure_returns_503(self, mock_scanner, caplog):
        mock_scanner.check_tenant.side_effect = DatabaseError("disk I/O error")

        response = await check_conditions(
            _make_request(mock_scanner, {"clientId": "alice"})
        )

        assert response.status_code == 503
        assert json.loads(response.body) == {"error": "Plant data unavailable"}
        assert "Condition check failed for tenant alice" in caplog.text

    async def test_uses_real_scanner(self, scanner, repository, make_plant):
        repository.add(make_plant(7, "Fern"), moisture=[95, 90])

        response = await check_conditions(
            _make_request(scanner, {"clientId": "alice"})
        )

        assert json.loads(response.body) == [
            {"plantId": 7, "plantName": "Fern", "message": "Fern's soil is too wet!"}
        ]


class TestRoutes:
    """Tests for the paths the condition check is served on."""

    @pytest.mark.parametrize(
        "path", ["/api/check-conditions", "/plant/check-conditions/"]
    )
    def test_check_conditions_paths(self, path):
        with patch("plantwatch.server.entrypoint.configure"):
            app = create_app()

        endpoints = {route.path: route.endpoint for route in app.routes}
        assert endpoints[path] is check_conditions
