class DesignAuditorError(Exception):
    """Base class for errors raised by the design auditor."""


class TreeBuildError(DesignAuditorError):
    """Raised when a raw design payload cannot be turned into a node tree."""
