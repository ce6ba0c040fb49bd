"""
Error taxonomy for erd-hull.

Every error aborts the current invocation. The CLI turns them into a
message on stderr and a non-zero exit status.
"""


class ErdHullError(Exception):
    """Base class for all erd-hull failures."""


class NotFoundError(ErdHullError, LookupError):
    """A file, focus area or entity group could not be found."""


class MalformedDocumentError(ErdHullError, ValueError):
    """The input document cannot be parsed as SVG markup."""


class InvalidDocumentError(MalformedDocumentError):
    """The document parsed but lacks the structure needed for output."""


class ConfigParseError(ErdHullError, ValueError):
    """A configuration file has the wrong shape or misses required fields."""


class InsufficientPointsError(ErdHullError, ValueError):
    """Too few (or degenerate) points for the requested geometry."""


class InvalidCurveTypeError(ErdHullError, ValueError):
    """Unknown curve family name."""
