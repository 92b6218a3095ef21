"""Typed planning failures.

Structural ambiguity (two independent lists driving one request) is fatal
and raised. Missing or failed dependencies and absent paths are not errors
and never reach this module.
"""


class PlannerError(Exception):
    """Base class for every error raised by the planner."""

    error_type = "planner-error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ExpansionError(PlannerError):
    """A query item tried to expand on more than one multi-valued source."""

    error_type = "expansion-error"


class InvalidParameterRepetition(PlannerError):
    """A map parameter references more than one multi-valued body."""

    error_type = "invalid-parameter-repetition"


class QueryParseError(PlannerError):
    error_type = "query-parse-error"


class UnknownResourceError(PlannerError):
    error_type = "unknown-resource"


class UnknownEncoderError(PlannerError):
    error_type = "unknown-encoder"
