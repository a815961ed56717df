from ..cloud_meta import FieldResult, MalformedResponse, NotFoundStatus, Provider, TransportError, capture, fetch
from ..system import reverse_lookup
from typing import Callable
import copy
import json
import logging
import os


logger = logging.getLogger(__name__)

# method name prefix for field getters, the rest of the name is the field name
PREFIX = "get_"

# value of derived hostname fields when there's nothing to derive from
NOT_FOUND = "not found"


def default(defaults, opt_name):
    """Return the value for `opt_name` from its env var, or from `defaults` if unset."""
    # do a copy, so it's not possible to modify the defaults
    envvar, def_val = copy.deepcopy(defaults[opt_name])
    value = os.environ.get(envvar)
    if value is None:
        return def_val
    try:
        return type(def_val)(value)
    except ValueError:
        raise ValueError(f"{envvar}={value!r} is not a valid {type(def_val).__name__}") from None


class ProviderAdapter:
    """Common behaviour of the cloud metadata services.

    Subclasses set the provider tag and the headers the service requires, and define
    their fields as `get_<field>` methods. Every request of an adapter (the probe included)
    goes to the same base URL, with the same headers and timeout.
    """

    provider: Provider = Provider.UNKNOWN
    headers: dict[str, str] = {}
    # path of the metadata root, relative to the base URL
    probe_path = ""
    # key is the option name, value is a tuple of env var name and the default value
    DEFAULTS: dict = {}

    def __init__(
            self,
            base_url: str | None = None,
            timeout: float | None = None,
            resolver: Callable[[str], list[str]] = reverse_lookup,
    ):
        self.base_url = (base_url or default(self.DEFAULTS, "base_url")).rstrip("/")
        self.timeout = timeout if timeout is not None else default(self.DEFAULTS, "timeout")
        self.resolver = resolver

    def __repr__(self):
        return f"{type(self).__name__}({self.base_url!r}, timeout={self.timeout})"

    @property
    def name(self) -> str:
        return self.provider.value

    def params(self, **extra) -> dict | None:
        """Query parameters sent with a request, on top of `extra`."""
        return extra or None

    def url(self, path: str = "") -> str:
        return f"{self.base_url}/{path}" if path else self.base_url

    def request(self, path: str = "", **params):
        return fetch(self.url(path), headers=dict(self.headers), timeout=self.timeout, params=self.params(**params))

    def text(self, path: str, **params) -> str:
        response = self.request(path, **params)
        if response.not_found:
            raise NotFoundStatus(self.url(path))
        return response.body.strip()

    def json(self, path: str, **params) -> dict:
        body = self.text(path, **params)
        try:
            data = json.loads(body)
        except ValueError as e:
            raise MalformedResponse(f"{self.url(path)}: invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedResponse(f"{self.url(path)}: expected a JSON object, got {type(data).__name__}")
        return data

    def probe(self) -> bool:
        """Check whether this provider's metadata service answers on its root."""
        try:
            response = self.request(self.probe_path)
        except TransportError:
            logger.debug("%s metadata service is unreachable", self.name)
            return False
        if response.not_found:
            logger.debug("%s metadata root returned 404", self.name)
            return False
        logger.debug("%s metadata service answered with %d", self.name, response.status_code)
        return True

    def hostname_of(self, address_getter: Callable[[], str]) -> str:
        """Reverse DNS name of the address returned by `address_getter`.

        A missing address or a missing PTR record is not an error, NOT_FOUND is returned instead.
        """
        try:
            address = address_getter()
        except NotFoundStatus:
            return NOT_FOUND
        if not address:
            return NOT_FOUND
        names = self.resolver(address)
        return names[0] if names else NOT_FOUND

    @classmethod
    def fields(cls) -> list[str]:
        """Names of the fields this provider exposes, in definition order."""
        return [
            name[len(PREFIX):]
            for name, member in vars(cls).items()
            if name.startswith(PREFIX) and callable(member)
        ]

    def field(self, name: str) -> FieldResult:
        """Fetch a single field, metadata failures end up in the result instead of being raised."""
        if name not in self.fields():
            raise KeyError(f"{self.name} has no field {name!r}")
        return capture(name, getattr(self, f"{PREFIX}{name}"))

    def collect(self) -> list[FieldResult]:
        return [self.field(name) for name in self.fields()]
