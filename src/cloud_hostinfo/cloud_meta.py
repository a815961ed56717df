from dataclasses import dataclass
from typing import Any, Callable
import enum
import logging
import requests


logger = logging.getLogger(__name__)


class Provider(enum.Enum):
    AWS = "aws"
    AZURE = "azure"
    GCP = "gcp"
    UNKNOWN = "unknown"


class MetadataError(Exception):
    """Base class for failures talking to a metadata service."""


class TransportError(MetadataError):
    """The metadata service could not be reached (refused, timed out, DNS failure)."""


class NotFoundStatus(MetadataError):
    """The metadata service answered 404 for the requested path."""

    def __init__(self, url: str):
        super().__init__(f"{url} not found")
        self.url = url


class MalformedResponse(MetadataError):
    """The metadata service answered, but the body could not be parsed."""


@dataclass(frozen=True)
class MetadataResponse:
    body: str
    status_code: int

    @property
    def not_found(self) -> bool:
        return self.status_code == requests.codes.not_found


def fetch(url: str, headers: dict | None = None, timeout: float = 5.0, params: dict | None = None) -> MetadataResponse:
    """Issue a single GET against a metadata URL.

    Every status code is returned as-is, 404 included, it's up to the caller to interpret it.
    Raises TransportError if the request did not get an answer at all.
    """
    try:
        response = requests.get(url, headers=headers, params=params, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.debug("GET %s failed: %s", url, e)
        raise TransportError(f"{url}: {e}") from e
    logger.debug("GET %s -> %d", response.url, response.status_code)
    return MetadataResponse(body=response.text, status_code=response.status_code)


@dataclass(frozen=True)
class FieldResult:
    name: str
    value: Any = None
    error: str | None = None
    # the service has no value for this field here, which isn't an error
    absent: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def capture(name: str, getter: Callable[[], Any], errors=(MetadataError,)) -> FieldResult:
    """Run `getter` and wrap its outcome, turning any of `errors` into a failed FieldResult.

    A 404 on the field's path gives an absent result, with no value and no error."""
    try:
        return FieldResult(name, getter())
    except NotFoundStatus as e:
        logger.debug("Field %s is absent: %s", name, e)
        return FieldResult(name, absent=True)
    except errors as e:
        logger.debug("Field %s unavailable: %s", name, e)
        return FieldResult(name, error=str(e) or type(e).__name__)
