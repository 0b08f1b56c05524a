"""dex-render: Render the Kubernetes objects that run Dex.

This package turns an installation spec and an identity provider into
the complete set of Kubernetes objects that deploy the Dex identity
broker, without talking to a cluster.

Example usage:
    from dex_render import DexComponent, render

    dex = DexComponent(installation, identity_provider)
    result = render(dex, image_set)
    for obj in result.to_create:
        ...
"""

__version__ = "0.1.0"

from dex_render.core.component import Component, render
from dex_render.core.dex import DexComponent
from dex_render.exceptions import (
    ConfigSerializationError,
    DexRenderError,
    ImageNotFoundError,
    ImageResolutionError,
    ManifestParsingError,
)
from dex_render.identity import IdentityProviderConfig, OIDCIdentityProvider
from dex_render.models import CertificateManagement, ImageSet, InstallationSpec, OSType, RenderResult

__all__ = [
    # Version
    "__version__",
    # Rendering
    "Component",
    "DexComponent",
    "render",
    # Identity providers
    "IdentityProviderConfig",
    "OIDCIdentityProvider",
    # Models
    "CertificateManagement",
    "ImageSet",
    "InstallationSpec",
    "OSType",
    "RenderResult",
    # Exceptions
    "DexRenderError",
    "ImageNotFoundError",
    "ImageResolutionError",
    "ConfigSerializationError",
    "ManifestParsingError",
]
