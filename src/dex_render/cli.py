#!/usr/bin/env python
"""Command-line interface for dex-render.

This module provides the main CLI entry point, handling command-line
argument parsing, loading the input manifests and writing the rendered
Dex objects as multi-document YAML.
"""

from pathlib import Path

import click
from icecream import ic

from dex_render import __version__, console
from dex_render.constants import DEFAULT_OPERATOR_NAMESPACE
from dex_render.core.component import render
from dex_render.core.dex import DEFAULT_REPLICAS, DexComponent
from dex_render.core.manifest import dump_manifests
from dex_render.dns import DEFAULT_CLUSTER_DOMAIN
from dex_render.exceptions import ImageResolutionError, ManifestParsingError
from dex_render.loading import load_identity_provider, load_image_set, load_installation, load_secret
from dex_render.models import ImageSet

_ERR_OUTPUT_PATH = "Cannot write to output path '{path}': {reason}"


def build_component(
    installation_file: str,
    identity_provider_file: str,
    secret_files: tuple[str, ...],
    pull_secret_files: tuple[str, ...],
    *,
    cluster_domain: str,
    operator_namespace: str,
    replicas: int,
) -> DexComponent:
    """Load the input manifests and configure a Dex renderer.

    Args:
        installation_file: Path to the Installation manifest.
        identity_provider_file: Path to the identity provider settings.
        secret_files: Paths to Secret manifests with Dex credentials.
        pull_secret_files: Paths to image pull Secret manifests.
        cluster_domain: Cluster DNS domain.
        operator_namespace: Namespace the operator runs in.
        replicas: Number of Dex pods.

    Returns:
        The configured DexComponent.

    Raises:
        ManifestParsingError: If any input cannot be loaded.

    """
    console.action(f"Loading installation from {console.highlight(installation_file)}")
    installation = load_installation(installation_file)
    ic(installation)

    secrets = [load_secret(path) for path in secret_files]
    pull_secrets = [load_secret(path) for path in pull_secret_files]
    console.step(f"Loaded {len(secrets)} secret(s) and {len(pull_secrets)} pull secret(s)")

    dex_config = load_identity_provider(
        identity_provider_file,
        secrets,
        certificate_management=installation.certificate_management,
        operator_namespace=operator_namespace,
    )
    ic(dex_config.connector())

    return DexComponent(
        installation,
        dex_config,
        pull_secrets=pull_secrets,
        cluster_domain=cluster_domain,
        operator_namespace=operator_namespace,
        replicas=replicas,
    )


def write_output(text: str, output: str | None) -> None:
    """Write rendered YAML to a file, or to stdout when no file is given.

    Args:
        text: The rendered YAML.
        output: Output file path, or None for stdout.

    Raises:
        click.ClickException: If the output file cannot be written.

    """
    if output is None:
        click.echo(text, nl=False)
        return

    try:
        Path(output).write_text(text)
    except OSError as err:
        raise click.ClickException(_ERR_OUTPUT_PATH.format(path=output, reason=err.strerror)) from err
    console.success(f"Saved to {console.highlight(output)}")


@click.command(help="Render the Kubernetes objects that run Dex")
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option("--installation", "-i", required=False, help="Installation manifest")
@click.option("--identity-provider", "-p", required=False, help="identity provider settings file")
@click.option("--image-set", required=False, help="ImageSet manifest to pin image digests")
@click.option("--secret", "-s", "secrets", multiple=True, help="Secret manifest with Dex credentials (repeatable)")
@click.option("--pull-secret", "pull_secrets", multiple=True, help="image pull Secret manifest (repeatable)")
@click.option("--cluster-domain", default=DEFAULT_CLUSTER_DOMAIN, show_default=True, help="cluster DNS domain")
@click.option(
    "--operator-namespace",
    default=DEFAULT_OPERATOR_NAMESPACE,
    envvar="OPERATOR_NAMESPACE",
    show_default=True,
    help="namespace the operator runs in",
)
@click.option("--replicas", default=DEFAULT_REPLICAS, type=click.IntRange(min=1), show_default=True, help="Dex pods")
@click.option("--output", "-o", required=False, help="write manifests to this file instead of stdout")
def cli(
    version: bool,
    debug: bool,
    installation: str | None,
    identity_provider: str | None,
    image_set: str | None,
    secrets: tuple[str, ...],
    pull_secrets: tuple[str, ...],
    cluster_domain: str,
    operator_namespace: str,
    replicas: int,
    output: str | None,
) -> None:
    """Process CLI arguments and render Dex.

    Args:
        version: Print version and exit.
        debug: Enable debug output.
        installation: Path to the Installation manifest.
        identity_provider: Path to the identity provider settings.
        image_set: Path to an ImageSet manifest.
        secrets: Paths to Secret manifests.
        pull_secrets: Paths to image pull Secret manifests.
        cluster_domain: Cluster DNS domain.
        operator_namespace: Namespace the operator runs in.
        replicas: Number of Dex pods.
        output: Output file path.

    """
    if not debug:
        ic.disable()

    if version:
        click.echo(__version__)
        return

    if installation is None or identity_provider is None:
        raise click.UsageError("--installation and --identity-provider are required")

    try:
        component = build_component(
            installation,
            identity_provider,
            secrets,
            pull_secrets,
            cluster_domain=cluster_domain,
            operator_namespace=operator_namespace,
            replicas=replicas,
        )
        pins: ImageSet | None = None
        if image_set:
            pins = load_image_set(image_set)
            console.info(f"Pinning {len(pins.images)} image(s) from ImageSet {console.highlight(pins.name)}")
        else:
            console.warning("No ImageSet given, images are referenced by tag")
        result = render(component, pins)
    except ManifestParsingError as e:
        raise click.ClickException(str(e)) from None
    except ImageResolutionError as e:
        for err in e.errors:
            console.error(str(err))
        raise click.ClickException(f"Failed to resolve {len(e.errors)} image(s)") from None

    write_output(dump_manifests(result.to_create), output)

    console.newline()
    console.summary_panel(
        "Dex Rendered",
        {
            "Objects": str(len(result.to_create)),
            "Image": component.image,
            "Certificate management": "enabled" if component.installation.certificate_management else "disabled",
            "Output": output or "stdout",
        },
    )


if __name__ == "__main__":
    cli()
