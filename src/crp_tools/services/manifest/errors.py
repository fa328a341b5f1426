"""Manifest pipeline exceptions."""


class ManifestError(Exception):
    """Base class for failures that abort manifest generation."""


class ManifestInputError(ManifestError):
    """The uploaded customer list is missing or unusable."""


class BinCountError(ManifestInputError):
    """A bin-size column holds a value that is not a non-negative integer."""


class RenderError(ManifestError):
    """The manifest template could not be obtained or bound."""


class TemplateFetchError(RenderError):
    """The manifest template could not be fetched."""
