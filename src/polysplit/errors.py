"""
Error taxonomy raised by the splitter and its collaborators.

Single edge pairs that cannot produce a cut are not errors; the driver
filters them out silently. The exceptions below are what reaches the caller.
"""


class PolygonSplitError(Exception):
    """Base class for every error raised by polysplit."""
    pass


class InvalidArgumentError(PolygonSplitError, ValueError):
    """Bad part count, or a polygon the splitter cannot work with."""
    pass


class NumericalFailureError(PolygonSplitError, ArithmeticError):
    """
    Floating point results became inconsistent: a non-finite pivot or sweep
    fraction, a part whose area misses its target, or parts and remainder that
    no longer add up to the original area.
    """
    pass


class InfeasibleSplitError(PolygonSplitError):
    """No edge pair produced a cut of the required area."""
    pass


class JobSourceError(PolygonSplitError, OSError):
    """A job record could not be read (missing file, HTTP failure...)."""
    pass
