"""
Tests for the command line tool
"""

import json

import httpx
import pytest

from . import main as mainModule
from .client import NominatimClient
from .main import main, parseArguments, runCommand


@pytest.fixture(autouse=True)
def noLoggingSetup(monkeypatch):
    """Keep test runner's logging configuration intact."""
    monkeypatch.setattr(mainModule, "initLogging", lambda config: None)


def testParseSearchArguments():
    """Test search subcommand arguments, dood!"""
    args = parseArguments(["search", "lisboa", "--city", "Lisboa", "--limit", "5", "--exclude", "1", "--exclude", "2"])

    assert args.command == "search"
    assert args.text == "lisboa"
    assert args.city == "Lisboa"
    assert args.postalCode == ""
    assert args.limit == 5
    assert args.exclude == ["1", "2"]
    assert args.timeout is None


def testParseReverseArguments():
    """Test reverse subcommand arguments."""
    args = parseArguments(["--timeout", "2.5", "reverse", "38.69", "-9.32", "--extra-tags"])

    assert args.command == "reverse"
    assert (args.latitude, args.longitude) == ("38.69", "-9.32")
    assert args.extraTags
    assert args.timeout == 2.5


def testCommandIsRequired():
    """Test missing command is a usage error."""
    with pytest.raises(SystemExit):
        parseArguments([])


def testMissingConfigFile(tmp_path):
    """Test missing config gives exit code 1, dood!"""
    assert main(["-c", str(tmp_path / "missing.toml"), "status"]) == 1


def testPrintConfig(tmp_path, capsys):
    """Test --print-config dumps loaded configuration."""
    configPath = tmp_path / "config.toml"
    configPath.write_text('[nominatim]\nbase-url = "http://geo.test"\n')

    assert main(["-c", str(configPath), "--print-config"]) == 0

    assert json.loads(capsys.readouterr().out) == {"nominatim": {"base-url": "http://geo.test"}}


@pytest.fixture
def mockClient(monkeypatch):
    """Make fromConfig() return client served by MockTransport, recording requests."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/reverse":
            return httpx.Response(200, json={"error": {"code": 704, "message": "No value"}})
        return httpx.Response(200, json=[{"place_id": 1, "display_name": "Lisboa"}])

    def fromConfig(config):
        client = NominatimClient(config["base-url"], httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        client._ownsHttpClient = True
        return client

    monkeypatch.setattr(mainModule.NominatimClient, "fromConfig", staticmethod(fromConfig))
    return requests


@pytest.mark.asyncio
async def testRunSearchCommand(mockClient):
    """Test search command builds query from arguments, dood!"""
    args = parseArguments(["search", "lisboa", "--limit", "3"])

    output = await runCommand(args, {"base-url": "http://geo.test", "accept-language": ["pt"]})

    assert output[0]["display_name"] == "Lisboa"
    params = mockClient[0].url.params
    assert params["q"] == "lisboa"
    assert params["limit"] == "3"
    assert params["accept-language"] == "pt"


def testMainReportsServiceError(tmp_path, mockClient, capsys):
    """Test failed call gives exit code 1 and error on stderr."""
    configPath = tmp_path / "config.toml"
    configPath.write_text('[nominatim]\nbase-url = "http://geo.test"\n')

    assert main(["-c", str(configPath), "reverse", "0", "0"]) == 1

    assert "704: No value" in capsys.readouterr().err
