"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class ContractError(PipelineError):
    """Raised when the output document breaks its own invariants."""

    error_code = "CONTRACT_ERROR"


class StageError(PipelineError):
    """Raised for failures that abort the whole run (missing input, write errors)."""

    error_code = "STAGE_ERROR"
