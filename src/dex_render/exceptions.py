"""Custom exceptions for dex-render.

This module defines the exception hierarchy used throughout the package
to report rendering problems to the surrounding application.
"""


class DexRenderError(Exception):
    """Base exception for all dex-render errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all dex-render errors with a single
    except clause if desired.
    """

    pass


class ImageNotFoundError(DexRenderError):
    """Raised when a single image reference cannot be resolved.

    This happens when an ImageSet is supplied but does not pin the
    requested component image.
    """

    def __init__(self, image: str) -> None:
        self.image = image
        super().__init__(f"ImageSet did not contain image {image}")


class ImageResolutionError(DexRenderError):
    """Raised when one or more image lookups of a component fail.

    Every failed lookup is kept in ``errors`` so the caller sees all of
    them at once instead of only the first.

    Attributes:
        errors: The individual resolution failures, in lookup order.

    """

    def __init__(self, errors: list[ImageNotFoundError]) -> None:
        self.errors = list(errors)
        super().__init__(", ".join(str(err) for err in self.errors))


class ConfigSerializationError(DexRenderError):
    """Raised when the Dex configuration document cannot be encoded.

    The document shape is fully controlled by this package, so this
    signals a bug rather than bad input. It is never caught internally.
    """

    pass


class ManifestParsingError(DexRenderError):
    """Raised when an input manifest file cannot be loaded.

    This can occur when:
    - The file does not exist
    - The file is not valid YAML
    - The YAML does not describe the expected resource
    """

    pass
