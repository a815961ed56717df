from .cloud_meta import MetadataError, Provider
from .providers import ProviderAdapter, adapters as default_adapters
from typing import Iterable
import logging


logger = logging.getLogger(__name__)


def detect(adapters: Iterable[ProviderAdapter] | None = None) -> ProviderAdapter | None:
    """Return the first adapter whose metadata service answers, None if none of them does."""
    if adapters is None:
        adapters = default_adapters()
    for adapter in adapters:
        if adapter.probe():
            logger.debug("This is a %s host", adapter.name)
            return adapter
    logger.debug("This host is not on any known cloud provider")
    return None


def detect_provider(adapters: Iterable[ProviderAdapter] | None = None) -> Provider:
    adapter = detect(adapters)
    return adapter.provider if adapter else Provider.UNKNOWN


def get_instance_id(adapters: Iterable[ProviderAdapter] | None = None):
    """Return the instance ID and the provider's name, or Nones if it can't be determined."""
    adapter = detect(adapters)
    if adapter is None:
        return None, None
    try:
        return adapter.get_instance_id(), adapter.name
    except MetadataError as e:
        logger.debug("Couldn't fetch the %s instance ID: %s", adapter.name, e)
        return None, adapter.name
