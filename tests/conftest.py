"""Pytest configuration for tests.

No sys.path hacks - tests should import from the installed wsdldoc package.
"""

from pathlib import Path

import httpx
import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def multiple_namespaces_xml() -> str:
    return (FIXTURES / "multiple_namespaces.xml").read_text(encoding="utf-8")


@pytest.fixture
def external_wsdl_path() -> Path:
    return FIXTURES / "wsdl_with_external_schemas.xml"


@pytest.fixture
def fixture_client():
    """httpx client that serves tests/fixtures under http://example.com/svc/."""
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        relative = request.url.path.removeprefix("/svc/")
        path = FIXTURES / relative
        if not path.is_file():
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=path.read_text(encoding="utf-8"))

    client = httpx.Client(transport=httpx.MockTransport(handler))
    client.requested = requested
    yield client
    client.close()
