"""Output reporters for parse and enhancement results.

CLIReporter prints a human-readable, color-coded listing; JSONReporter
writes the camelCase ``to_dict`` form for tooling.
"""

import json
import sys
from typing import Any, TextIO

from .models import (
    ConflictSeverity,
    EnhancementResult,
    NodeStyleMapping,
    ParseResult,
    StyleConflict,
    StylesheetSummary,
)


class CLIReporter:
    """CLI reporter with color-coded output.

    Colors: red=high, yellow=medium, blue=low severity conflicts.

    Example output:
        Header (1:2) .header [class] confidence 96%
          MEDIUM color rgb(255, 0, 0) (design: rgb(0, 0, 255))
            -> Consider using design color: rgb(0, 0, 255)

        1 mapping(s), coverage 100%, 1 conflict(s) in 3ms
    """

    COLORS = {
        ConflictSeverity.HIGH: "\033[0;31m",  # Red
        ConflictSeverity.MEDIUM: "\033[1;33m",  # Yellow
        ConflictSeverity.LOW: "\033[0;34m",  # Blue
    }
    WARNING_COLOR = "\033[1;33m"
    BOLD = "\033[1m"
    RESET = "\033[0m"
    DIM = "\033[2m"

    def __init__(self, stream: TextIO | None = None, use_color: bool | None = None):
        """Initialize the CLI reporter.

        Args:
            stream: Output stream (default: stdout).
            use_color: Whether to use ANSI colors. Auto-detects if None.
        """
        self.stream = stream if stream is not None else sys.stdout
        if use_color is None:
            self.use_color = hasattr(self.stream, "isatty") and self.stream.isatty()
        else:
            self.use_color = use_color

    def _paint(self, text: str, color: str) -> str:
        if not self.use_color:
            return text
        return f"{color}{text}{self.RESET}"

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def report(self, result: EnhancementResult) -> None:
        """Output mappings, conflicts and suggestions."""
        self._print_warnings(result.parse_warnings)

        for mapping in result.mappings:
            self._report_mapping(mapping)

        if result.suggestions:
            self._print()
            self._print(self._paint("Suggestions:", self.BOLD))
            for suggestion in result.suggestions:
                self._print(f"  - {suggestion}")

        self._print_summary(result)

    def _report_mapping(self, mapping: NodeStyleMapping) -> None:
        rule = mapping.top_rule
        header = (
            f"{self._paint(mapping.node_name or mapping.node_id, self.BOLD)} "
            f"({mapping.node_id}) {rule.selector} [{mapping.method.value}] "
            f"confidence {mapping.confidence:.0%}"
        )
        self._print(header)

        if len(mapping.matched_rules) > 1:
            others = ", ".join(r.selector for r in mapping.matched_rules[1:])
            self._print(self._paint(f"  also: {others}", self.DIM))

        for conflict in mapping.conflicts:
            self._report_conflict(conflict)

    def _report_conflict(self, conflict: StyleConflict) -> None:
        color = self.COLORS.get(conflict.severity, "")
        label = self._paint(conflict.severity.value.upper(), color)
        self._print(
            f"  {label} {conflict.property} {conflict.css_value} "
            f"(design: {conflict.design_value})"
        )
        self._print(self._paint(f"    -> {conflict.suggestion}", self.DIM))

    def _print_warnings(self, warnings: list[str]) -> None:
        for warning in warnings:
            self._print(self._paint(f"warning: {warning}", self.WARNING_COLOR))
        if warnings:
            self._print()

    def _print_summary(self, result: EnhancementResult) -> None:
        stats = result.statistics
        summary = (
            f"\n{len(result.mappings)} mapping(s), coverage {result.coverage:.0%}, "
            f"{len(result.conflicts)} conflict(s) in {stats.processing_time_ms:.0f}ms"
        )
        if result.high_severity_count:
            summary += f" ({result.high_severity_count} high severity)"
        self._print(summary)

    def report_parse(self, result: ParseResult) -> None:
        """Output parsed rules with their source positions."""
        self._print_warnings(result.warnings)

        for rule in result.rules:
            self._print(
                f"{rule.source_line}:{rule.source_column} "
                f"{self._paint(rule.selector, self.BOLD)} "
                f"(specificity {rule.specificity})"
            )
            for declaration in rule.declarations:
                important = " !important" if declaration.important else ""
                self._print(f"  {declaration.property}: {declaration.value}{important}")

        for error in result.errors:
            self._print(self._paint(f"error: {error}", self.COLORS[ConflictSeverity.HIGH]))

        stats = result.statistics
        self._print(
            f"\n{stats.total_rules} rule(s), {stats.total_declarations} declaration(s), "
            f"{len(result.warnings)} warning(s) in {stats.processing_time_ms:.0f}ms"
        )

    def report_summary(self, summary: StylesheetSummary) -> None:
        """Output the design-token inventory, skipping empty sections."""
        sections = [
            ("variables", [f"--{k}: {v}" for k, v in summary.variables.items()]),
            ("colors", summary.colors),
            ("fonts", summary.fonts),
            ("spacing", summary.spacing),
            ("border radii", summary.border_radii),
            ("shadows", summary.shadows),
            ("animations", summary.animations),
            ("components", summary.components),
            ("layers", [f"{sel} -> {layer}" for sel, layer in summary.layers.items()]),
        ]
        self._print()
        self._print(self._paint("Design tokens:", self.BOLD))
        for label, values in sections:
            if values:
                self._print(f"  {label}: {', '.join(values)}")


class JSONReporter:
    """JSON reporter producing the camelCase result dictionaries."""

    def __init__(self, stream: TextIO | None = None, indent: int | None = 2):
        """Initialize the JSON reporter.

        Args:
            stream: Output stream (default: stdout).
            indent: JSON indentation, or None for compact output.
        """
        self.stream = stream if stream is not None else sys.stdout
        self.indent = indent

    def report(self, result: EnhancementResult) -> dict[str, Any]:
        """Output an enhancement result as JSON.

        Returns:
            The output dictionary (also written to stream).
        """
        output = result.to_dict()
        json.dump(output, self.stream, indent=self.indent)
        self.stream.write("\n")
        return output

    def report_parse(self, result: ParseResult) -> dict[str, Any]:
        """Output a parse result as JSON."""
        output = result.to_dict()
        json.dump(output, self.stream, indent=self.indent)
        self.stream.write("\n")
        return output
