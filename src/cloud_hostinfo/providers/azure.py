"""Azure Instance Metadata Service.

https://learn.microsoft.com/en-us/azure/virtual-machines/instance-metadata-service
"""

from ..cloud_meta import MalformedResponse, Provider
from .base import ProviderAdapter, default


class Azure(ProviderAdapter):
    provider = Provider.AZURE
    headers = {"Metadata": "true"}
    DEFAULTS = {
        "base_url": ("AZURE_METADATA_URL", "http://169.254.169.254/metadata/instance"),
        "api_version": ("AZURE_METADATA_API_VERSION", "2021-02-01"),
        "timeout": ("AZURE_METADATA_TIMEOUT", 10.0),
    }

    def __init__(self, base_url=None, timeout=None, api_version: str | None = None, **kwargs):
        super().__init__(base_url, timeout, **kwargs)
        self.api_version = api_version or default(self.DEFAULTS, "api_version")

    def params(self, **extra):
        # IMDS rejects requests without an api-version
        return {"api-version": self.api_version} | extra

    def leaf(self, path: str) -> str:
        # without format=text, leaf values are returned as JSON strings
        return self.text(path, format="text")

    def compute(self, path: str) -> str:
        return self.leaf(f"compute/{path}")

    def ipv4(self, path: str) -> str:
        return self.leaf(f"network/interface/0/ipv4/ipAddress/0/{path}")

    def get_public_hostname(self) -> str:
        return self.hostname_of(self.get_public_ip_address)

    def get_hostname(self) -> str:
        return self.compute("name")

    def get_local_ip_address(self) -> str:
        return self.ipv4("privateIpAddress")

    def get_public_ip_address(self) -> str:
        return self.ipv4("publicIpAddress")

    def get_instance_id(self) -> str:
        return self.compute("vmId")

    def get_zone(self) -> str:
        return self.compute("zone")

    def get_machine_type(self) -> str:
        return self.compute("vmSize")

    def get_location(self) -> str:
        document = self.json("compute")
        if not isinstance(document.get("location"), str):
            raise MalformedResponse(f"{self.url('compute')}: no location in the compute document")
        return document["location"]

    def get_offer(self) -> str:
        return self.compute("offer")

    def get_publisher(self) -> str:
        return self.compute("publisher")

    def get_version(self) -> str:
        return self.compute("version")

    def get_sku(self) -> str:
        return self.compute("sku")
