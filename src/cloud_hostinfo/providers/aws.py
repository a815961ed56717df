"""AWS EC2 instance metadata.

https://docs.aws.amazon.com/AWSEC2/latest/UserGuide/ec2-instance-metadata.html
"""

from ..cloud_meta import MalformedResponse, Provider
from .base import ProviderAdapter


class AWS(ProviderAdapter):
    provider = Provider.AWS
    # the EC2 metadata service takes no special header
    headers = {}
    probe_path = "meta-data/"
    DEFAULTS = {
        "base_url": ("AWS_METADATA_URL", "http://169.254.169.254/latest"),
        "timeout": ("AWS_METADATA_TIMEOUT", 5.0),
    }

    def meta(self, name: str) -> str:
        return self.text(f"meta-data/{name}")

    def get_fqdn(self) -> str:
        return self.meta("local-hostname")

    def get_public_hostname(self) -> str:
        return self.meta("public-hostname")

    def get_hostname(self) -> str:
        return self.meta("hostname")

    def get_local_ip_address(self) -> str:
        return self.meta("local-ipv4")

    def get_public_ip_address(self) -> str:
        return self.meta("public-ipv4")

    def get_instance_id(self) -> str:
        return self.meta("instance-id")

    def get_zone(self) -> str:
        return self.meta("placement/availability-zone")

    def get_machine_type(self) -> str:
        return self.meta("instance-type")

    def get_image_id(self) -> str:
        # the document's keys depend on the instance state, so imageId might be missing
        document = self.json("dynamic/instance-identity/document")
        image_id = document.get("imageId") or ""
        if not isinstance(image_id, str):
            raise MalformedResponse(f"imageId should be a string, got {image_id!r}")
        return image_id
