"""Manifest serialization.

This module converts rendered ``kubernetes.client`` objects into plain
manifests (camelCase keys, unset fields dropped) and multi-document YAML.
"""

from typing import Any

import yaml
from kubernetes import client


def to_manifest(obj: Any) -> dict[str, Any]:
    """Convert a rendered object into a plain manifest dictionary.

    Args:
        obj: A ``kubernetes.client`` model.

    Returns:
        The manifest as the Kubernetes API would accept it.

    """
    return client.ApiClient().sanitize_for_serialization(obj)


def dump_manifests(objs: list[Any]) -> str:
    """Encode rendered objects as a multi-document YAML string.

    Args:
        objs: The objects to encode, in order.

    Returns:
        YAML documents separated by ``---``.

    """
    manifests = [to_manifest(obj) for obj in objs]
    return yaml.safe_dump_all(manifests, default_flow_style=False, sort_keys=False)
