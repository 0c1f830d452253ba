"""Pipeline error taxonomy.

Every failure that aborts a feed run is one of these. They are raised by the
core (configuration) and the shell (fetch, submit) and propagate unchanged to
the entry point, which logs them and reports them to the runtime.
"""


class PipelineError(Exception):
    """Base class for errors that abort a feed run."""


class InvalidConfiguration(PipelineError):
    """A configuration value is missing, malformed or out of range.

    Attributes:
        errors: Every problem found, one message per field
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid configuration: " + "; ".join(self.errors))


class FetchFailure(PipelineError):
    """The upstream feed could not be fetched (network error or non-2xx)."""


class UnexpectedFailure(PipelineError):
    """Anything else, e.g. an upstream body that is not a GeoJSON document."""


class SubmitFailure(PipelineError):
    """The output sink rejected the feature collection."""
