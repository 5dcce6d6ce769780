"""Unit tests for MCP server module.

Tests cover:
- Server configuration
- Server instance creation
- Parameter validation
- Tool calls over the MCP client protocol
"""

import json
from importlib.metadata import PackageNotFoundError

import pytest

from . import lib as mcp_lib
from .lib import (
    ServerConfig,
    TransportType,
    get_server_capabilities,
    get_server_version,
)
from .server import _validate_category, _validate_layer, create_server, mcp, main


def _payload(result) -> dict:
    """Decode the JSON text content of a tool result."""
    return json.loads(result.content[0].text)


# =============================================================================
# Configuration Tests
# =============================================================================


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    @pytest.mark.unit
    def test_default_config(self):
        """Default config has expected values."""
        config = ServerConfig()

        assert config.name == "canvas-patterns"
        assert config.transport == TransportType.STDIO
        assert config.host == "0.0.0.0"
        assert config.port == 18080
        assert config.path == "/mcp"

    @pytest.mark.unit
    def test_from_env_reads_port(self, monkeypatch):
        """from_env picks up MCP_PORT."""
        monkeypatch.setenv("MCP_PORT", "9100")

        config = ServerConfig.from_env(transport=TransportType.HTTP)

        assert config.port == 9100
        assert config.transport == TransportType.HTTP

    @pytest.mark.unit
    def test_transport_from_string(self):
        """Transport can be created from string."""
        assert TransportType("stdio") == TransportType.STDIO
        assert TransportType("http") == TransportType.HTTP
        assert TransportType("sse") == TransportType.SSE


class TestServerUtilities:
    """Tests for server utility functions."""

    @pytest.mark.unit
    def test_get_server_version(self):
        assert len(get_server_version().split(".")) == 3

    @pytest.mark.unit
    def test_get_server_version_reads_package_metadata(self, monkeypatch):
        """Version comes from the installed distribution, not a literal."""
        monkeypatch.setattr(mcp_lib, "version", lambda name: "9.8.7")
        assert get_server_version() == "9.8.7"

    @pytest.mark.unit
    def test_get_server_version_without_install(self, monkeypatch):
        """A source checkout with no metadata reports the fallback version."""

        def missing(name):
            raise PackageNotFoundError(name)

        monkeypatch.setattr(mcp_lib, "version", missing)
        assert get_server_version() == mcp_lib.FALLBACK_VERSION

    @pytest.mark.unit
    def test_get_server_capabilities(self):
        caps = get_server_capabilities()
        assert caps["tools"] is True
        assert caps["resources"] is True


class TestServerInstance:
    """Tests for FastMCP server instance."""

    @pytest.mark.unit
    def test_create_server_returns_mcp(self):
        assert create_server() is mcp

    @pytest.mark.unit
    def test_server_has_name(self):
        assert mcp.name == "canvas-patterns"

    @pytest.mark.unit
    def test_main_rejects_unknown_transport(self):
        with pytest.raises(SystemExit):
            main(["--transport", "websocket"])


class TestValidationHelpers:
    """Tests for parameter validation functions."""

    @pytest.mark.unit
    def test_valid_category(self):
        _validate_category("Navigation")
        _validate_category("Data Visualization")

    @pytest.mark.unit
    def test_invalid_category(self):
        with pytest.raises(ValueError, match="Invalid category"):
            _validate_category("navigation")

    @pytest.mark.unit
    def test_invalid_layer(self):
        _validate_layer("composers")
        with pytest.raises(ValueError, match="Invalid layer"):
            _validate_layer("organisms")


# =============================================================================
# MCP Protocol Tests
# =============================================================================


@pytest.mark.mcp
class TestMCPProtocol:
    """Integration tests using the MCP client protocol."""

    @pytest.mark.asyncio
    async def test_client_can_list_tools(self, mcp_client):
        tools = await mcp_client.list_tools()

        assert {t.name for t in tools} == {
            "list_patterns",
            "get_pattern",
            "search_patterns",
            "detect_patterns",
            "validate_patterns",
            "generate_pattern",
            "status",
        }

    @pytest.mark.asyncio
    async def test_status(self, mcp_client):
        data = _payload(await mcp_client.call_tool("status", {}))

        assert data["status"] == "healthy"
        assert "pattern.tabs" in data["patterns"]
        assert data["configuration"]["exclusive_mapping"] is False

    @pytest.mark.asyncio
    async def test_search_patterns(self, mcp_client):
        data = _payload(await mcp_client.call_tool("search_patterns", {"query": "TAB"}))
        assert [p["id"] for p in data["patterns"]] == ["pattern.tabs"]

    @pytest.mark.asyncio
    async def test_list_patterns_by_category(self, mcp_client):
        data = _payload(
            await mcp_client.call_tool("list_patterns", {"category": "Forms"})
        )
        assert data["count"] == 1
        assert data["patterns"][0]["id"] == "pattern.form"

    @pytest.mark.asyncio
    async def test_list_patterns_rejects_bad_category(self, mcp_client):
        with pytest.raises(Exception, match="Invalid category"):
            await mcp_client.call_tool("list_patterns", {"category": "Widgets"})

    @pytest.mark.asyncio
    async def test_get_pattern_not_found(self, mcp_client):
        with pytest.raises(Exception, match="not found"):
            await mcp_client.call_tool("get_pattern", {"pattern_id": "pattern.nope"})

    @pytest.mark.asyncio
    async def test_validate_patterns(self, mcp_client, incomplete_tabs_document):
        data = _payload(
            await mcp_client.call_tool(
                "validate_patterns", {"document": incomplete_tabs_document}
            )
        )

        assert data["valid"] is False
        assert any("tabpanel" in error for error in data["errors"])

    @pytest.mark.asyncio
    async def test_detect_patterns(self, mcp_client, complete_tabs_document):
        data = _payload(
            await mcp_client.call_tool(
                "detect_patterns", {"document": complete_tabs_document}
            )
        )

        assert data["count"] == 1
        assert data["instances"][0]["isComplete"] is True

    @pytest.mark.asyncio
    async def test_generate_pattern(self, mcp_client):
        data = _payload(
            await mcp_client.call_tool(
                "generate_pattern", {"pattern_id": "pattern.card", "name": "Card"}
            )
        )

        assert data["node_count"] == 4
        assert data["document"]["schemaVersion"] == "0.1.0"

    @pytest.mark.asyncio
    async def test_generate_pattern_flat_by_default(self, mcp_client):
        data = _payload(
            await mcp_client.call_tool(
                "generate_pattern", {"pattern_id": "pattern.card", "name": "Card"}
            )
        )
        assert len(data["document"]["artboards"][0]["children"]) == 4

    @pytest.mark.asyncio
    async def test_generate_pattern_follows_nested_setting(self, mcp_client, monkeypatch):
        monkeypatch.setenv("PATTERN_GENERATOR_NESTED", "true")

        status = _payload(await mcp_client.call_tool("status", {}))
        data = _payload(
            await mcp_client.call_tool(
                "generate_pattern", {"pattern_id": "pattern.card", "name": "Card"}
            )
        )

        assert status["configuration"]["generator_nested"] is True
        top = data["document"]["artboards"][0]["children"]
        assert [n["semanticKey"] for n in top] == ["card.container"]
        assert data["node_count"] == 4

    @pytest.mark.asyncio
    async def test_generate_pattern_explicit_flat_overrides_setting(
        self, mcp_client, monkeypatch
    ):
        monkeypatch.setenv("PATTERN_GENERATOR_NESTED", "true")

        data = _payload(
            await mcp_client.call_tool(
                "generate_pattern",
                {"pattern_id": "pattern.card", "name": "Card", "nested": False},
            )
        )
        assert len(data["document"]["artboards"][0]["children"]) == 4

    @pytest.mark.asyncio
    async def test_read_manifest_schema(self, mcp_client):
        contents = await mcp_client.read_resource("schema://manifest")
        schema = json.loads(contents[0].text)
        assert "structure" in schema["properties"]

    @pytest.mark.asyncio
    async def test_read_document_schema(self, mcp_client):
        contents = await mcp_client.read_resource("schema://document")
        schema = json.loads(contents[0].text)
        assert "artboards" in schema["properties"]
