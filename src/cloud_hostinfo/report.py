from . import system
from .cloud_meta import FieldResult, Provider
from .providers import ProviderAdapter, adapter_for
from dataclasses import dataclass
import logging


logger = logging.getLogger(__name__)

NOT_A_CLOUD = "This host is not on any known cloud provider"


def errors(results) -> dict:
    return {result.name: result.error for result in results if not result.ok}


@dataclass(frozen=True)
class HostReport:
    provider: Provider
    fields: tuple[FieldResult, ...] = ()
    host: tuple[FieldResult, ...] = ()

    def values(self) -> dict:
        """Cloud metadata values by field name, None for the absent fields and the ones that couldn't be fetched."""
        return {result.name: result.value for result in self.fields}

    def as_dict(self) -> dict:
        return {
            "provider": self.provider.value,
            "fields": self.values(),
            "host": {result.name: result.value for result in self.host},
            "errors": {
                "fields": errors(self.fields),
                "host": errors(self.host),
            },
        }


def build_report(provider: Provider, adapter: ProviderAdapter | None = None, host_info: bool = True) -> HostReport:
    """Fetch every field of `provider`, plus the OS-level host info if `host_info` is set.

    Fields are fetched one by one, a failing field doesn't stop the others.
    """
    if adapter is not None and adapter.provider != provider:
        raise ValueError(f"{adapter!r} can't report on a {provider.value} host")
    fields = ()
    if provider != Provider.UNKNOWN:
        adapter = adapter or adapter_for(provider)
        fields = tuple(adapter.collect())
        failed = [result.name for result in fields if not result.ok]
        if failed:
            logger.debug("%d of %d %s fields failed: %s", len(failed), len(fields), provider.value, ", ".join(failed))
    host = tuple(system.collect()) if host_info else ()
    return HostReport(provider=provider, fields=fields, host=host)


def format_value(result: FieldResult) -> str:
    if not result.ok:
        return f"<error: {result.error}>"
    if result.absent:
        return "<none>"
    if isinstance(result.value, list):
        return ", ".join(result.value) if result.value else "<none>"
    if isinstance(result.value, bool):
        return "yes" if result.value else "no"
    return str(result.value)


def render(report: HostReport) -> list[str]:
    if report.provider == Provider.UNKNOWN:
        lines = [NOT_A_CLOUD]
    else:
        lines = [f"Cloud provider: {report.provider.name}"]
        lines += [f"  {result.name}: {format_value(result)}" for result in report.fields]
    if report.host:
        lines.append("Host:")
        lines += [f"  {result.name}: {format_value(result)}" for result in report.host]
    return lines
