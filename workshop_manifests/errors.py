"""Exceptions raised by the manifest pipelines."""


class ManifestError(Exception):
    """Base error for anything that stops a pipeline from producing output."""


class ParameterError(ManifestError):
    """A pipeline parameter is unknown or malformed."""


class ChartNotFoundError(ManifestError):
    def __init__(self, name: str, known: list[str]):
        self.name = name
        self.known = known
        super().__init__(f"unknown chart {name!r} (known: {', '.join(known)})")
