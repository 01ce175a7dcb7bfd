"""Error types raised by route-scaffold.

Every error the generator raises on purpose derives from GeneratorError so the
CLI can report it in one place. File system failures are left as OSError.
"""


class GeneratorError(Exception):
    """Base class for all generator errors."""


class SpecificationUnavailable(GeneratorError):
    """The API document could not be read (missing file, URL source, bad YAML)."""


class InvalidSpecification(GeneratorError):
    """The API document was read but does not have the expected shape."""


class MalformedSourceError(GeneratorError):
    """An existing JavaScript file could not be parsed into a syntax tree."""

    def __init__(self, message: str, path: str | None = None, line: int | None = None):
        self.path = path
        self.line = line
        location = path or "<source>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")


class UnsupportedParameterLocation(GeneratorError):
    """A parameter uses an `in` value that has no request accessor."""

    def __init__(self, location: str, name: str):
        self.location = location
        self.name = name
        super().__init__(f"parameter {name!r}: location {location!r} is not supported")
