from . import DefaultOpt
from . import providers
from .cloud_meta import Provider
from .detector import detect, get_instance_id
from .report import NOT_A_CLOUD, build_report, format_value, render
from click._utils import UNSET
from importlib.metadata import version, PackageNotFoundError
from typing import Annotated, get_type_hints
import click
import inspect
import json
import logging
import os
import sentry_sdk


def get_installed_package_version(package_name: str) -> str:
    try:
        return version(package_name)
    except PackageNotFoundError:
        return f"Package '{package_name}' is not installed."


# turns the Annotated option declarations of `settings` and `report_opts` into
# the options of the cli group and of the report command
def add_click_opts(func):
    def inner(cmd):
        """Convert type hints into click options."""
        hints = get_type_hints(func, include_extras=True)
        for name, annotation in hints.items():
            default = inspect.signature(func).parameters[name].default
            for meta in getattr(annotation, "__metadata__", []):
                if isinstance(meta, (click.Option, click.Argument)):
                    # Click 8.3+ marks a missing default with UNSET instead of None,
                    # in both cases the function parameter's default is used
                    meta_default = getattr(meta, "default", None)
                    if default is not inspect.Parameter.empty:
                        if meta_default is None or meta_default is UNSET:
                            meta.default = default
                    if meta.name != name:
                        meta.name = name
                    cmd.params.append(meta)
        return cmd
    return inner


def settings(
    timeout: Annotated[float | None, DefaultOpt(["--timeout"], type=float, help="Metadata request timeout in seconds, overrides the per-provider defaults")] = os.environ.get("HOSTINFO_TIMEOUT", None),
    verbose: Annotated[bool, DefaultOpt(["--verbose", "-v"], is_flag=True, default=False, help="Log metadata requests and failures")] = False,
):
    pass


def report_opts(
    output_format: Annotated[str, DefaultOpt(["--format"], type=click.Choice(["text", "json"]), help="Output format")] = os.environ.get("HOSTINFO_FORMAT", "text"),
    host_info: Annotated[bool, DefaultOpt(["--host-info/--no-host-info"], default=True, help="Include the OS-level host info")] = True,
):
    pass


def get_adapters(provider: str | None = None, **kwargs) -> list:
    """Build the metadata adapters, a bad value in their env configuration is a usage error."""
    try:
        if provider:
            return [providers.adapter_for(provider, **kwargs)]
        return providers.adapters(**kwargs)
    except ValueError as e:
        raise click.UsageError(str(e))


def set_cloud_context(instance_id: str | None, cloud_provider: str | None):
    sentry_sdk.set_context("cloud_metadata", {"instance-id": instance_id, "cloud-provider": cloud_provider})


@add_click_opts(settings)
@click.group()
@click.pass_context
def cli(ctx, timeout, verbose):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    sentry_sdk.init(release=get_installed_package_version("cloud-hostinfo"))
    ctx.obj = dict(timeout=timeout)


@cli.command(name="detect")
@click.pass_obj
def detect_cmd(obj):
    """Print the cloud provider hosting this machine."""
    instance_id, cloud_provider = get_instance_id(get_adapters(**obj))
    set_cloud_context(instance_id, cloud_provider)
    click.echo(cloud_provider or Provider.UNKNOWN.value)


@add_click_opts(report_opts)
@cli.command(name="report")
@click.pass_obj
def report_cmd(obj, output_format, host_info):
    """Print all the metadata of the cloud provider hosting this machine."""
    adapter = detect(get_adapters(**obj))
    provider = adapter.provider if adapter else Provider.UNKNOWN
    report = build_report(provider, adapter, host_info=host_info)
    set_cloud_context(report.values().get("instance_id"), adapter.name if adapter else None)
    if output_format == "json":
        click.echo(json.dumps(report.as_dict(), indent=2))
    else:
        for line in render(report):
            click.echo(line)


@cli.command(name="get")
@click.argument("field_name")
@click.option("--provider", type=click.Choice([p.value for p in providers.supported_providers]), help="Skip detection and query this provider")
@click.pass_context
def get_cmd(ctx, field_name, provider):
    """Print a single metadata field."""
    if provider:
        adapter = get_adapters(provider, **ctx.obj)[0]
    else:
        adapter = detect(get_adapters(**ctx.obj))
        if adapter is None:
            click.echo(NOT_A_CLOUD, err=True)
            ctx.exit(1)
    if field_name not in adapter.fields():
        raise click.BadParameter(
            f"{adapter.name} fields are: {', '.join(adapter.fields())}",
            param_hint="FIELD_NAME",
        )
    result = adapter.field(field_name)
    if not result.ok:
        click.echo(result.error, err=True)
        ctx.exit(1)
    click.echo(format_value(result))


if __name__ == "__main__":
    cli()
