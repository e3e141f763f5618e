"""Exceptions raised by the checklist pipeline."""


class DeployChecklistError(Exception):
    """Base exception for deploy checklist errors."""
    pass


class ChecklistConfigurationError(DeployChecklistError):
    """The run lacks an input it cannot do without (e.g. a release tag)."""
    pass


class ChecklistParseError(DeployChecklistError):
    """A checklist body does not follow the checklist format."""
    pass
