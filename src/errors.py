"""Error types raised by the pdf-repage pipeline."""


class RepageError(RuntimeError):
    """Base class for every failure that aborts a run."""


class ArgumentError(RepageError):
    """The command line did not name an input and an output path."""


class LicenseError(RepageError):
    """The activation key is missing or malformed."""


class DocumentOpenError(RepageError):
    """The input PDF is missing, unreadable or not a PDF."""


class DocumentStructureError(RepageError):
    """The input PDF's page tree could not be read."""


class ImageExtractionError(RepageError):
    """An embedded image could not be enumerated or decoded."""


class ImageWriteError(RepageError):
    """An extracted image could not be written to the staging directory."""


class ImageDecodeError(RepageError):
    """A staged image file could not be decoded."""


class CompositionError(RepageError):
    """An image could not be placed on an output page."""


class SerializationError(RepageError):
    """The output document could not be serialized or written."""
