"""The contract between renderers and the reconciliation engine."""

from typing import Protocol

from dex_render.models import ImageSet, OSType, RenderResult


class Component(Protocol):
    """Protocol for anything that renders a subsystem into cluster objects"""

    def resolve_images(self, image_set: ImageSet | None) -> None:
        """Resolve image references; raise one error covering every failure"""
        ...

    def supported_os_type(self) -> OSType:
        """Return the platform the rendered workloads run on"""
        ...

    def objects(self) -> RenderResult:
        """Return the objects to create and to delete"""
        ...

    def ready(self) -> bool:
        """Return whether external prerequisites of the component are met"""
        ...


def render(component: Component, image_set: ImageSet | None = None) -> RenderResult:
    """Resolve a component's images and render its objects.

    Args:
        component: The component to render.
        image_set: Optional pin set for image resolution.

    Returns:
        The component's RenderResult.

    Raises:
        ImageResolutionError: If any image of the component cannot be resolved.

    """
    component.resolve_images(image_set)
    return component.objects()
