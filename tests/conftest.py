import socket

import pytest

from cloud_hostinfo.providers import AWS, GCP, Azure

PUBLIC_IP = "203.0.113.7"
PTR_RECORDS = {PUBLIC_IP: ["7.113.0.203.bc.googleusercontent.com", "alias.example.com"]}

AWS_PREFIX = "/aws/latest"
GCP_PREFIX = "/gcp/computeMetadata/v1/instance"
AZURE_PREFIX = "/azure/metadata/instance"
AZURE_API_VERSION = "2021-02-01"


def fake_resolver(address):
    return PTR_RECORDS.get(address, [])


@pytest.fixture(autouse=True)
def no_proxy(monkeypatch):
    # requests would send the mock metadata requests through a proxy otherwise
    for name in ("http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.upper(), raising=False)


@pytest.fixture
def dead_url():
    """URL of a local port nothing listens on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}"


@pytest.fixture
def aws(httpserver):
    return AWS(base_url=httpserver.url_for(AWS_PREFIX), timeout=2, resolver=fake_resolver)


@pytest.fixture
def gcp(httpserver):
    return GCP(base_url=httpserver.url_for(GCP_PREFIX), timeout=2, resolver=fake_resolver)


@pytest.fixture
def azure(httpserver):
    return Azure(base_url=httpserver.url_for(AZURE_PREFIX), timeout=2, resolver=fake_resolver)


@pytest.fixture
def dead_adapters(dead_url):
    return dict(
        aws=AWS(base_url=f"{dead_url}{AWS_PREFIX}", timeout=1),
        gcp=GCP(base_url=f"{dead_url}{GCP_PREFIX}", timeout=1),
        azure=Azure(base_url=f"{dead_url}{AZURE_PREFIX}", timeout=1),
    )


def expect_gcp(httpserver, path, **kwargs):
    return httpserver.expect_request(
        f"{GCP_PREFIX}/{path}" if path else GCP_PREFIX,
        headers={"Metadata-Flavor": "Google"},
        **kwargs,
    )


def expect_azure(httpserver, path, text=True):
    query = {"api-version": AZURE_API_VERSION}
    if text:
        query["format"] = "text"
    return httpserver.expect_request(
        f"{AZURE_PREFIX}/{path}" if path else AZURE_PREFIX,
        headers={"Metadata": "true"},
        query_string=query,
    )


def expect_aws(httpserver, path):
    return httpserver.expect_request(f"{AWS_PREFIX}/{path}")
