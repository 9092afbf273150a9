"""Exception hierarchy for Mammaltag."""


class MammaltagError(Exception):
    """Base exception for all Mammaltag errors."""

    pass


class InvalidParametersError(MammaltagError):
    """A tag parameter is out of range."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid tag parameter '{field}': {value!r} (must be > 0)")


class FontError(MammaltagError):
    """Errors related to font resolution or loading."""

    pass


class FontNotFoundError(FontError):
    """No usable font was found on the host."""

    def __init__(self, searched: list[str]) -> None:
        self.searched = searched
        super().__init__(
            "No system font found. Install dejavu-sans or liberation-sans, "
            "or pass an explicit font path."
        )


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class GeometryError(MammaltagError):
    """Errors in geometric calculations."""

    pass


class MeshError(GeometryError):
    """Mesh data violates its structural invariants."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class KernelError(MammaltagError):
    """Errors raised by the modeling kernel adapter."""

    pass


class KernelUnavailableError(KernelError):
    """The modeling kernel bindings could not be imported."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Modeling kernel unavailable: {reason}")


class BooleanOperationError(KernelError):
    """A boolean or fillet operation reported failure."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Kernel operation '{operation}' failed: {reason}")


class KernelOperationError(KernelError):
    """A kernel construction step (edge, wire, face, prism) failed."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Kernel operation '{operation}' failed: {reason}")


class BuildError(MammaltagError):
    """Terminal failure of a tag build request."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Tag build failed: {reason}")


class ExportError(MammaltagError):
    """Error encoding a solid into an interchange format."""

    def __init__(self, fmt: str, reason: str) -> None:
        self.fmt = fmt
        self.reason = reason
        super().__init__(f"Export to {fmt} failed: {reason}")
