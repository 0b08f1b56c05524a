"""Input manifest loading.

This module provides functions for reading the YAML documents the CLI
renders from: Installation, ImageSet, Secret and identity provider
settings.
"""

import base64
from typing import Any

import yaml
from kubernetes import client

from dex_render.constants import (
    DEFAULT_OPERATOR_NAMESPACE,
    DEX_SECRET_NAME,
    DEX_TLS_SECRET_NAME,
    OIDC_SECRET_NAME,
)
from dex_render.exceptions import ManifestParsingError
from dex_render.identity import OIDCIdentityProvider
from dex_render.models import CertificateManagement, ImageSet, InstallationSpec


def parse_manifest_file(path: str) -> dict[str, Any] | None:
    """Parse a single-document YAML file.

    Args:
        path: Path to the file.

    Returns:
        The parsed YAML document as a dictionary, or None if empty.

    Raises:
        ManifestParsingError: If the file does not exist, contains multiple
            documents, contains malformed/invalid YAML, or is not a YAML mapping.

    """
    try:
        with open(path) as stream:
            docs = [doc for doc in yaml.safe_load_all(stream) if doc is not None]
            if len(docs) > 1:
                raise ManifestParsingError(
                    f"File '{path}' contains multiple YAML documents. Only single document files are supported."
                )
            if not docs:
                return None
            result = docs[0]
            if not isinstance(result, dict):
                raise ManifestParsingError(
                    f"File '{path}' does not contain a valid YAML mapping. Expected a Kubernetes resource document."
                )
            return result
    except FileNotFoundError as err:
        raise ManifestParsingError(f"File '{path}' does not exist") from err
    except yaml.YAMLError as err:
        raise ManifestParsingError(f"File '{path}' contains malformed YAML: {err}") from err


def _require_document(path: str) -> dict[str, Any]:
    doc = parse_manifest_file(path)
    if doc is None:
        raise ManifestParsingError(f"File '{path}' is empty")
    return doc


def _spec_of(doc: dict[str, Any]) -> dict[str, Any]:
    """Return the ``spec`` of a resource, or the document itself if it is a bare spec."""
    spec = doc.get("spec", doc) if "kind" in doc else doc
    return spec or {}


def parse_certificate_management(raw: dict[str, Any] | None) -> CertificateManagement | None:
    """Build CertificateManagement settings from an Installation's spec field.

    Args:
        raw: The ``certificateManagement`` mapping, or None.

    Returns:
        The settings, or None when certificate management is disabled.

    Raises:
        ManifestParsingError: If required fields are missing or caCert is not
            valid base64.

    """
    if raw is None:
        return None
    try:
        ca_cert = raw["caCert"]
        signer_name = raw["signerName"]
    except KeyError as err:
        raise ManifestParsingError(f"certificateManagement is missing field {err}") from err
    # caCert is a byte field, so manifests carry it base64 encoded
    if isinstance(ca_cert, str):
        try:
            ca_cert = base64.b64decode(ca_cert, validate=True)
        except ValueError as err:
            raise ManifestParsingError(f"certificateManagement.caCert is not valid base64: {err}") from err
    return CertificateManagement(
        ca_cert=ca_cert,
        signer_name=signer_name,
        key_algorithm=raw.get("keyAlgorithm", "RSAWithSize2048"),
        signature_algorithm=raw.get("signatureAlgorithm", "SHA256WithRSA"),
    )


def load_installation(path: str) -> InstallationSpec:
    """Load an Installation resource (or a bare Installation spec).

    Args:
        path: Path to the YAML file.

    Returns:
        The InstallationSpec.

    Raises:
        ManifestParsingError: If the file cannot be parsed.

    """
    spec = _spec_of(_require_document(path))
    tolerations = tuple(
        client.V1Toleration(
            key=toleration.get("key"),
            operator=toleration.get("operator"),
            value=toleration.get("value"),
            effect=toleration.get("effect"),
            toleration_seconds=toleration.get("tolerationSeconds"),
        )
        for toleration in spec.get("controlPlaneTolerations") or []
    )
    return InstallationSpec(
        registry=spec.get("registry", ""),
        image_path=spec.get("imagePath", ""),
        certificate_management=parse_certificate_management(spec.get("certificateManagement")),
        control_plane_node_selector=dict(spec.get("controlPlaneNodeSelector") or {}),
        control_plane_tolerations=tolerations,
    )


def load_image_set(path: str) -> ImageSet:
    """Load an ImageSet resource.

    Args:
        path: Path to the YAML file.

    Returns:
        The ImageSet pin set.

    Raises:
        ManifestParsingError: If the file cannot be parsed or an entry lacks
            an image or digest.

    """
    doc = _require_document(path)
    images: dict[str, str] = {}
    for entry in _spec_of(doc).get("images") or []:
        try:
            images[entry["image"]] = entry["digest"]
        except (KeyError, TypeError) as err:
            raise ManifestParsingError(f"ImageSet '{path}' has an invalid image entry: {entry!r}") from err
    name = (doc.get("metadata") or {}).get("name", "")
    return ImageSet(name=name, images=images)


def load_secret(path: str) -> client.V1Secret:
    """Load a Secret manifest.

    ``stringData`` entries are encoded and merged into ``data`` the way the
    API server would.

    Args:
        path: Path to the YAML file.

    Returns:
        The V1Secret.

    Raises:
        ManifestParsingError: If the file is not a Secret.

    """
    doc = _require_document(path)
    if doc.get("kind") != "Secret":
        raise ManifestParsingError(f"File '{path}' does not contain a Secret")

    metadata = doc.get("metadata") or {}
    if "name" not in metadata:
        raise ManifestParsingError(f"Secret in '{path}' has no name")

    data: dict[str, str] = dict(doc.get("data") or {})
    for key, value in (doc.get("stringData") or {}).items():
        data[key] = base64.b64encode(str(value).encode()).decode("ascii")

    return client.V1Secret(
        api_version=doc.get("apiVersion", "v1"),
        kind="Secret",
        metadata=client.V1ObjectMeta(name=metadata["name"], namespace=metadata.get("namespace")),
        type=doc.get("type", "Opaque"),
        data=data,
    )


def load_identity_provider(
    path: str,
    secrets: list[client.V1Secret],
    *,
    certificate_management: CertificateManagement | None = None,
    operator_namespace: str = DEFAULT_OPERATOR_NAMESPACE,
) -> OIDCIdentityProvider:
    """Load OIDC identity provider settings.

    The file holds ``managerDomain`` and an ``oidc`` section with
    ``issuerURL``, ``usernameClaim``, ``groupsClaim`` and
    ``requestedScopes``. Credentials are looked up by name in ``secrets``.

    Args:
        path: Path to the YAML file.
        secrets: Loaded secrets to take the OIDC, Dex and TLS secrets from.
        certificate_management: CSR settings of the installation, if enabled.
        operator_namespace: Namespace the operator runs in.

    Returns:
        The identity provider.

    Raises:
        ManifestParsingError: If a setting or a required secret is missing.

    """
    spec = _spec_of(_require_document(path))
    oidc = spec.get("oidc") or {}
    if "issuerURL" not in oidc:
        raise ManifestParsingError(f"Identity provider '{path}' has no oidc.issuerURL")

    by_name = {secret.metadata.name: secret for secret in secrets}
    required = [OIDC_SECRET_NAME, DEX_SECRET_NAME]
    if certificate_management is None:
        required.append(DEX_TLS_SECRET_NAME)
    missing = [name for name in required if name not in by_name]
    if missing:
        raise ManifestParsingError(f"Required secret(s) not provided: {', '.join(missing)}")

    return OIDCIdentityProvider(
        manager_domain=spec.get("managerDomain", ""),
        issuer_url=oidc["issuerURL"],
        oidc_secret=by_name[OIDC_SECRET_NAME],
        dex_secret=by_name[DEX_SECRET_NAME],
        tls_secret=by_name.get(DEX_TLS_SECRET_NAME),
        certificate_management=certificate_management,
        username_claim=oidc.get("usernameClaim", "email"),
        groups_claim=oidc.get("groupsClaim", ""),
        scopes=tuple(oidc.get("requestedScopes") or ("openid", "email", "profile")),
        operator_namespace=operator_namespace,
    )
