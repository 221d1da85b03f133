"""Exception taxonomy shared by the filter tools."""


class FilterError(Exception):
    """Base class for every error a filter tool reports."""


class ArgumentError(FilterError):
    """Invalid option value or argument combination."""


class InputError(FilterError):
    """The input image is missing, empty or cannot be decoded."""


class PreconditionError(FilterError):
    """The input does not satisfy a requirement of the chosen mode."""


class ConvergenceError(FilterError):
    """An iterative step did not reach its target within the allowed passes."""
