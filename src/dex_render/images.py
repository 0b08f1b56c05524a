"""Image reference resolution.

This module maps logical components to concrete, pullable image
references, honoring registry and path overrides and optional ImageSet
digest pins.
"""

from typing import NamedTuple

from icecream import ic

from dex_render.exceptions import ImageNotFoundError
from dex_render.models import ImageSet, InstallationSpec

DEFAULT_REGISTRY = "quay.io/"


class ComponentImage(NamedTuple):
    """A known component image.

    Attributes:
        image: Image name without registry (e.g. ``tigera/dex``).
        version: Default tag used when no ImageSet is given.
        registry: Registry used when the installation does not override it.

    """

    image: str
    version: str
    registry: str = DEFAULT_REGISTRY


COMPONENT_DEX = ComponentImage(image="tigera/dex", version="v3.8.0")
COMPONENT_CSR_INIT_CONTAINER = ComponentImage(image="tigera/key-cert-provisioner", version="v1.1.0")


def replace_image_path(image: str, image_path: str) -> str:
    """Replace the first path segment of an image name.

    Args:
        image: The image name (e.g. 'tigera/dex').
        image_path: The replacement segment (e.g. 'acme').

    Returns:
        The image name with its first segment replaced (e.g. 'acme/dex').

    """
    segments = image.split("/")
    segments[0] = image_path
    return "/".join(segments)


def get_reference(
    component: ComponentImage,
    registry: str,
    image_path: str,
    image_set: ImageSet | None,
) -> str:
    """Resolve the image reference for a component.

    Args:
        component: The component whose image is resolved.
        registry: Registry override; empty selects the component default.
        image_path: Image path override; empty keeps the image's own path.
        image_set: Optional pin set. When given, the image must be pinned.

    Returns:
        ``<registry><image>:<version>`` without a pin set, or
        ``<registry><image>@<digest>`` with one.

    Raises:
        ImageNotFoundError: If the pin set does not contain the image.

    """
    if not registry:
        registry = component.registry
    elif not registry.endswith("/"):
        registry = f"{registry}/"

    image = component.image
    if image_path:
        image = replace_image_path(image, image_path)

    if image_set is None:
        return f"{registry}{image}:{component.version}"

    digest = image_set.digest_for(component.image)
    if digest is None:
        raise ImageNotFoundError(component.image)
    return f"{registry}{image}@{digest}"


def resolve_csr_init_image(installation: InstallationSpec, image_set: ImageSet | None) -> str:
    """Resolve the certificate bootstrap (CSR init container) image.

    Args:
        installation: Installation supplying the registry and path overrides.
        image_set: Optional pin set.

    Returns:
        The resolved key-cert-provisioner image reference.

    Raises:
        ImageNotFoundError: If the pin set does not contain the image.

    """
    reference = get_reference(
        COMPONENT_CSR_INIT_CONTAINER,
        installation.registry,
        installation.image_path,
        image_set,
    )
    ic(reference)
    return reference
