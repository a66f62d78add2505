"""
layerdoc Errors

Typed failures raised by document navigation and editing.
"""


class DocumentError(Exception):
    """Base error for the document model."""


class NotAFolderError(DocumentError):
    """A folder-only operation was invoked on a non-folder layer."""

    def __init__(self, message: str = "Layer is not a folder"):
        super().__init__(message)


class LayerNotFoundError(DocumentError):
    """A path or id references a layer that does not exist."""

    def __init__(self, message: str = "Layer not found"):
        super().__init__(message)


class InvalidPathError(DocumentError):
    """The path is not valid for the requested operation."""

    def __init__(self, message: str = "Invalid layer path"):
        super().__init__(message)


class IndexOutOfBoundsError(DocumentError):
    """An insertion or reorder index falls outside the folder."""

    def __init__(self, message: str = "Index out of bounds"):
        super().__init__(message)


class NonInvertibleTransformError(DocumentError):
    """The transform has no inverse (zero determinant)."""

    def __init__(self, message: str = "Transform is not invertible"):
        super().__init__(message)
