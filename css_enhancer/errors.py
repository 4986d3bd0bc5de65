"""Structured error types for the enhancer with recovery suggestions.

Only hard failures are raised: an internal stylesheet parse failure, an
invalid design document at the input boundary, or an unusable options
file. Soft anomalies (unmatched rules, low coverage) are reported as data
on the enhancement result instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of enhancer errors for organization and handling."""

    PARSE = "parse"  # Stylesheet scanning failed internally
    DESIGN_TREE = "design_tree"  # Malformed design document
    CONFIGURATION = "configuration"  # Invalid options or options file
    VALIDATION = "validation"  # Invalid arguments
    RUNTIME = "runtime"  # Unexpected errors


@dataclass
class EnhancerError(Exception):
    """Base class for structured enhancer errors with recovery suggestions.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
        exit_code: Exit code to use when this error causes termination.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = 1

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        """Return the formatted error message."""
        return self.format(use_color=False)


class StylesheetParseError(EnhancerError):
    """The stylesheet parser hit an internal failure."""

    def __init__(self, errors: list[str] | None = None):
        errors = list(errors or [])
        message = "CSS parsing failed"
        if errors:
            message = f"{message}: {errors[0]}"
        super().__init__(
            category=ErrorCategory.PARSE,
            message=message,
            suggestion="Check the stylesheet encoding and remove unusual content",
            details={"errors": "; ".join(errors)} if errors else None,
            exit_code=1,
        )
        self.errors = errors


class DesignTreeError(EnhancerError):
    """The design document could not be read as a node tree."""

    def __init__(self, message: str, node_path: str | None = None):
        super().__init__(
            category=ErrorCategory.DESIGN_TREE,
            message=message,
            suggestion="Pass a design file response or a single node object as JSON",
            details={"node": node_path} if node_path else None,
            exit_code=1,
        )


class ConfigurationError(EnhancerError):
    """Error in the options file or option values."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        suggestion: str | None = None,
    ):
        default_suggestion = "Check your options file syntax and value ranges"
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion or default_suggestion,
            details={"config_file": config_file} if config_file else None,
            exit_code=1,
        )


def handle_exception(
    error: Exception,
    use_color: bool = True,
    verbose: bool = False,
) -> tuple[str, int]:
    """Convert any exception to formatted output and exit code.

    Args:
        error: The exception to handle.
        use_color: Whether to use color in output.
        verbose: Whether to include full traceback.

    Returns:
        Tuple of (formatted_message, exit_code).
    """
    import traceback

    if isinstance(error, EnhancerError):
        message = error.format(use_color=use_color)
        exit_code = error.exit_code
    else:
        red = "\033[91m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        message = f"{red}Error:{reset} {str(error)}"
        exit_code = 1

    if verbose:
        message += "\n\nTraceback:\n" + traceback.format_exc()

    return message, exit_code
