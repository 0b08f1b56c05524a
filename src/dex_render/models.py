"""Data models for dex-render.

This module provides the type-safe input and output structures of the
renderer. Kubernetes objects themselves are ``kubernetes.client`` models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

from kubernetes import client


class OSType(str, Enum):
    """Platforms a rendered component can be scheduled on.

    Inherits from str to allow direct use in string contexts
    (e.g., node selector values, YAML output).
    """

    LINUX = "linux"
    WINDOWS = "windows"
    ANY = "any"


@dataclass(frozen=True, slots=True)
class CertificateManagement:
    """Parameters for provisioning TLS keys through a CSR workflow.

    Attributes:
        ca_cert: PEM encoded CA certificate that signs the issued certificates.
        signer_name: Kubernetes signer name the CSR is addressed to.
        key_algorithm: Algorithm of the generated private key.
        signature_algorithm: Algorithm used to sign the CSR.

    """

    ca_cert: bytes
    signer_name: str
    key_algorithm: str = "RSAWithSize2048"
    signature_algorithm: str = "SHA256WithRSA"


@dataclass(frozen=True, slots=True)
class InstallationSpec:
    """The parts of an Installation that affect how Dex is rendered.

    Attributes:
        registry: Registry override; empty means the component default.
        image_path: Image path override; replaces the image's first segment.
        certificate_management: CSR settings, or None when disabled.
        control_plane_node_selector: Node selector for control plane pods.
        control_plane_tolerations: Extra tolerations for control plane pods.

    """

    registry: str = ""
    image_path: str = ""
    certificate_management: CertificateManagement | None = None
    control_plane_node_selector: dict[str, str] = field(default_factory=dict)
    control_plane_tolerations: tuple[client.V1Toleration, ...] = ()


@dataclass(frozen=True, slots=True)
class ImageSet:
    """A pin set mapping image names to exact digests.

    Attributes:
        name: Name of the ImageSet resource.
        images: Image name (e.g. ``tigera/dex``) to digest (``sha256:...``).

    """

    name: str
    images: dict[str, str] = field(default_factory=dict)

    def digest_for(self, image: str) -> str | None:
        """Return the pinned digest for an image, or None if it is not pinned."""
        return self.images.get(image)


class RenderResult(NamedTuple):
    """Objects a component wants created and deleted.

    Attributes:
        to_create: Objects to create or update, in emission order.
        to_delete: Objects that must no longer exist.

    """

    to_create: list[Any]
    to_delete: list[Any]
