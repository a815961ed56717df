"""Google Compute Engine instance metadata.

https://cloud.google.com/compute/docs/metadata/overview
"""

from ..cloud_meta import Provider
from .base import ProviderAdapter


class GCP(ProviderAdapter):
    provider = Provider.GCP
    headers = {"Metadata-Flavor": "Google"}
    DEFAULTS = {
        "base_url": ("GCP_METADATA_URL", "http://metadata.google.internal/computeMetadata/v1/instance"),
        "timeout": ("GCP_METADATA_TIMEOUT", 5.0),
    }

    def get_fqdn(self) -> str:
        return self.text("hostname")

    def get_public_hostname(self) -> str:
        # not exposed by the metadata server, something like x.x.x.x.bc.googleusercontent.com
        return self.hostname_of(self.get_public_ip_address)

    def get_hostname(self) -> str:
        return self.text("name")

    def get_local_ip_address(self) -> str:
        return self.text("network-interfaces/0/ip")

    def get_public_ip_address(self) -> str:
        return self.text("network-interfaces/0/access-configs/0/external-ip")

    def get_instance_id(self) -> str:
        return self.text("id")

    def get_zone(self) -> str:
        return self.text("zone")

    def get_machine_type(self) -> str:
        return self.text("machine-type")

    def get_is_preemptible(self) -> bool:
        return self.text("scheduling/preemptible") == "TRUE"

    def get_tags(self) -> list[str]:
        return self.text("tags", alt="text").splitlines()
