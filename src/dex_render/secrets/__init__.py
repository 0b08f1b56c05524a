"""Secrets subpackage.

This package contains modules for building secrets and replicating
them into other namespaces.
"""

from dex_render.secrets.creation import (
    annotation_hash,
    create_certificate_secret,
    create_tls_secret,
    decode_value,
    new_secret,
)
from dex_render.secrets.replication import copy_to_namespace, reference_list, to_objects

__all__ = [
    # creation
    "new_secret",
    "create_tls_secret",
    "create_certificate_secret",
    "decode_value",
    "annotation_hash",
    # replication
    "copy_to_namespace",
    "to_objects",
    "reference_list",
]
