"""Core rendering subpackage.

This package contains the Component protocol, the Dex renderer and the
building blocks it assembles objects from.
"""

from dex_render.core.component import Component, render
from dex_render.core.config_document import build_config_document, redirect_uris, serialize_config_document
from dex_render.core.dex import DexComponent
from dex_render.core.manifest import dump_manifests, to_manifest

__all__ = [
    "Component",
    "render",
    "DexComponent",
    "build_config_document",
    "redirect_uris",
    "serialize_config_document",
    "dump_manifests",
    "to_manifest",
]
