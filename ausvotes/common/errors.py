"""Domain errors, warnings and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class SchemaError(PipelineError):
    """Raised when a table is missing columns a transformation depends on."""

    error_code = "SCHEMA_ERROR"


class TypeMismatchOnCombine(PipelineError):
    """Raised when tables cannot be combined because a column type pair has no coercion rule."""

    error_code = "TYPE_MISMATCH"


class InvalidBoundaryCombination(PipelineError):
    """Raised when no concordance exists between the requested boundary vintages."""

    error_code = "INVALID_BOUNDARY_COMBINATION"


class StageError(PipelineError):
    """Raised for stage failures that should halt in strict mode."""

    error_code = "STAGE_ERROR"


class RatioIntegrityWarning(UserWarning):
    """Correspondence ratios for one or more groups do not sum to 1."""


class RedistributionWarning(UserWarning):
    """Redistribution data references areas absent from the allocation table."""
