"""Secret replication across namespaces.

This module copies credential Secrets into other namespaces and turns
them into emittable objects. Source secrets are never mutated: every
copy carries its own metadata and its own data mapping.
"""

import copy

from kubernetes import client


def copy_to_namespace(namespace: str, *secrets: client.V1Secret) -> list[client.V1Secret]:
    """Copy secrets into a namespace.

    Only the name survives from the source metadata; labels, annotations,
    resource versions and owner references are dropped so the copy can be
    created fresh in the target namespace.

    Args:
        namespace: The target namespace.
        *secrets: The secrets to copy.

    Returns:
        New V1Secret objects, one per source secret, in the same order.

    """
    copies: list[client.V1Secret] = []
    for secret in secrets:
        copied = copy.deepcopy(secret)
        copied.metadata = client.V1ObjectMeta(name=secret.metadata.name, namespace=namespace)
        copies.append(copied)
    return copies


def to_objects(*secrets: client.V1Secret) -> list[client.V1Secret]:
    """Convert secrets into objects ready for emission.

    Secrets loaded from the API often lack ``apiVersion`` and ``kind``;
    those are filled in on a copy.

    Args:
        *secrets: The secrets to convert.

    Returns:
        Emittable V1Secret objects in the same order.

    """
    objects: list[client.V1Secret] = []
    for secret in secrets:
        obj = copy.deepcopy(secret)
        obj.api_version = obj.api_version or "v1"
        obj.kind = obj.kind or "Secret"
        objects.append(obj)
    return objects


def reference_list(secrets: list[client.V1Secret]) -> list[client.V1LocalObjectReference]:
    """Return local object references to secrets by name.

    Args:
        secrets: The secrets to reference.

    Returns:
        One reference per secret, usable as ``imagePullSecrets``.

    """
    return [client.V1LocalObjectReference(name=secret.metadata.name) for secret in secrets]
