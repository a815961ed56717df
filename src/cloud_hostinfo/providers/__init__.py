from ..cloud_meta import Provider
from .aws import AWS
from .azure import Azure
from .base import NOT_FOUND, ProviderAdapter
from .gcp import GCP


# probe order: AWS goes last, as its probe has no header and on Azure the shared
# 169.254.169.254 service answers it with a 400
DETECTION_ORDER = (GCP, Azure, AWS)

supported_providers = {klass.provider: klass for klass in DETECTION_ORDER}


def adapters(**kwargs) -> list[ProviderAdapter]:
    """Fresh adapters for all supported providers, in detection order."""
    return [klass(**kwargs) for klass in DETECTION_ORDER]


def adapter_for(provider: Provider | str, **kwargs) -> ProviderAdapter:
    if isinstance(provider, str):
        provider = Provider(provider.lower())
    if provider not in supported_providers:
        raise ValueError(f"No metadata service for {provider.value} hosts")
    return supported_providers[provider](**kwargs)


__all__ = [
    "AWS",
    "Azure",
    "DETECTION_ORDER",
    "GCP",
    "NOT_FOUND",
    "ProviderAdapter",
    "adapter_for",
    "adapters",
    "supported_providers",
]
