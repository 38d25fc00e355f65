"""
DocStore CRUD — Application, Configuration and Health Tests
============================================================

What:  Settings validation, resource selection, lifespan, middleware and /health.
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError
from pymongo.errors import ServerSelectionTimeoutError

from docstore_crud.config import Settings
from docstore_crud.main import create_app, lifespan
from docstore_crud.middleware.logging import split_resource_path
from docstore_crud.resources import build_resources, enabled_resources


class TestSettings:

    def test_defaults_match_original_deployment(self):
        config = Settings(_env_file=None, mongo_url="mongodb://localhost:27017")

        assert config.mongo_url == "mongodb://localhost:27017"
        assert config.backend_port == 8080
        assert (config.user_database, config.user_collection) == ("users", "users")
        assert (config.employee_database, config.employee_collection) == ("hrms", "employees")
        assert config.enabled_resources_list == ["user", "employee"]

    def test_enabled_resources_normalized(self):
        config = Settings(enabled_resources=" Employee , user,employee ")
        assert config.enabled_resources_list == ["employee", "user"]

    @pytest.mark.parametrize("value", ["", "user,customer", " , "])
    def test_enabled_resources_rejects_bad_values(self, value):
        with pytest.raises(ValidationError):
            Settings(enabled_resources=value)

    def test_log_level_uppercased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_log_level_rejects_unknown(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("EMPLOYEE_COLLECTION", "staff")
        monkeypatch.setenv("BACKEND_PORT", "9090")

        config = Settings()

        assert config.employee_collection == "staff"
        assert config.backend_port == 9090
        assert build_resources(config)["employee"].collection == "staff"


class TestResources:

    def test_field_names_exclude_identifier(self):
        registry = build_resources(Settings())
        assert registry["user"].field_names == ["name", "gender", "age"]
        assert registry["employee"].field_names == ["name", "salary", "age"]
        assert registry["employee"].path == "/employee"

    def test_enabled_resources_order(self):
        names = [r.name for r in enabled_resources(Settings(enabled_resources="employee,user"))]
        assert names == ["employee", "user"]


class TestAppFactory:

    @pytest.mark.asyncio
    async def test_single_resource_deployment(self, mock_collection, make_client):
        app = create_app(Settings(enabled_resources="employee"))

        async with make_client(app, mock_collection) as client:
            assert (await client.get("/employee")).status_code == 200
            assert (await client.get("/user")).status_code == 404

    @pytest.mark.asyncio
    async def test_request_id_generated_when_absent(self, test_client):
        response = await test_client.get("/user")

        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) == 8


class TestAccessLog:

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/user", ("user", None)),
            ("/user/", ("user", None)),
            ("/employee/65a1f0c2e4b0a1b2c3d4e5f6", ("employee", "65a1f0c2e4b0a1b2c3d4e5f6")),
        ],
    )
    def test_split_resource_path(self, path, expected):
        assert split_resource_path(path) == expected

    @pytest.mark.asyncio
    async def test_logs_resource_and_document_id(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="docstore_crud.access")

        response = await test_client.delete("/user/not-an-id", headers={"X-Request-ID": "req-7"})

        assert response.status_code == 400
        [record] = [r for r in caplog.records if r.name == "docstore_crud.access"]
        assert record.levelno == logging.WARNING
        assert record.resource == "user"
        assert record.document_id == "not-an-id"
        assert record.request_id == "req-7"
        assert "DELETE user/not-an-id -> 400" in record.getMessage()

    @pytest.mark.asyncio
    async def test_health_is_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="docstore_crud.access")

        await test_client.get("/health")

        assert not [r for r in caplog.records if r.name == "docstore_crud.access"]


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy_when_ping_succeeds(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["resources"] == ["/user", "/employee"]

    @pytest.mark.asyncio
    async def test_unhealthy_when_ping_fails(self, mock_collection, make_client, fake_client_for):
        client = fake_client_for(mock_collection)
        client.admin.command = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        app = create_app(Settings())

        async with make_client(app, mock_collection, client=client) as http:
            response = await http.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_publishes_client_and_shutdown_closes_it(self, mock_collection, fake_client_for):
        app = create_app(Settings())
        client = fake_client_for(mock_collection)
        client.close = AsyncMock()

        with patch("docstore_crud.main.create_client", return_value=client):
            async with lifespan(app):
                assert app.state.mongo_client is client
                client.admin.command.assert_awaited_once_with("ping")

        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unreachable_database_aborts_startup(self, mock_collection, fake_client_for):
        app = create_app(Settings())
        client = fake_client_for(mock_collection)
        client.admin.command = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        client.close = AsyncMock()

        with patch("docstore_crud.main.create_client", return_value=client):
            with pytest.raises(ServerSelectionTimeoutError):
                async with lifespan(app):
                    pass

        client.close.assert_awaited_once()
