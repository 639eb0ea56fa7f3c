"""Exceptions raised while building the documentation.

`DocsBuildError` and its subclasses are fatal and abort the build.
`ModuleReadError` and `PathPatternError` describe a single module's bad
input; the loaders catch them, log them and carry on without that module.
"""


class DocsBuildError(Exception):
    """A fatal build error."""


class GeneratorError(DocsBuildError):
    """An external documentation generator failed."""

    def __init__(self, generator: str, message: str):
        self.generator = generator
        super().__init__(f"{generator}: {message}")


class PluginError(DocsBuildError):
    """A manual page plugin broke its contract."""


class ModuleReadError(Exception):
    """A module descriptor file is missing or could not be parsed."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class PathPatternError(ValueError):
    """A route path could not be compiled into a matcher."""
