"""Enhancement coordinator.

Runs the full pipeline in one synchronous call: parse the stylesheet,
map rules onto the design tree, detect conflicts, then assemble
coverage, suggestions and statistics into an EnhancementResult.

Only a hard parser failure is raised. Low coverage, missing mappings
and conflicts are all reported as data on the result.
"""

from typing import Any

from .config import EnhancementOptions
from .conflicts import ConflictDetector
from .design import DesignNode, count_nodes, load_design_tree
from .enhancer_logging import LogCategory, get_category_logger
from .errors import StylesheetParseError
from .mapper import NodeMapper
from .models import (
    ConflictSeverity,
    EnhancementResult,
    EnhancementStatistics,
    NodeStyleMapping,
    StyleConflict,
)
from .parser import StylesheetParser
from .timing import PerformanceTimer

logger = get_category_logger(LogCategory.ENHANCER)

LOW_COVERAGE_THRESHOLD = 0.3
LOW_CONFIDENCE_THRESHOLD = 0.7

SUGGEST_SELECTOR_TUNING = (
    "No CSS mappings found. Consider adjusting your CSS selectors "
    "to match design node names."
)
SUGGEST_MAPPING_STRATEGY = (
    "Low CSS coverage. Consider using more specific selectors "
    "or enabling auto-mapping."
)
SUGGEST_STRATEGY_SWITCH = (
    "Many mappings have low confidence. Consider switching to a "
    "different mapping strategy."
)


class CSSEnhancer:
    """Enhances a design tree with a stylesheet.

    Instances hold only their options; every call builds fresh parser,
    mapper and detector state, so one instance may be shared between
    threads.
    """

    def __init__(self, options: EnhancementOptions | None = None):
        self.options = options or EnhancementOptions()

    def enhance(
        self,
        tree: DesignNode | dict[str, Any] | None,
        style_text: str | bytes | None,
    ) -> EnhancementResult:
        """Associate stylesheet rules with design nodes.

        Args:
            tree: Design tree root, raw design JSON, or None for an empty tree.
            style_text: Raw stylesheet text.

        Returns:
            EnhancementResult with mappings, conflicts, coverage,
            suggestions and statistics.

        Raises:
            StylesheetParseError: If the parser failed internally.
            DesignTreeError: If raw design JSON is malformed.
        """
        if tree is not None and not isinstance(tree, DesignNode):
            tree = load_design_tree(tree)

        with PerformanceTimer("enhance") as timer:
            parse_result = StylesheetParser().parse(style_text)
            if not parse_result.is_valid:
                raise StylesheetParseError(parse_result.errors)
            for warning in parse_result.warnings:
                logger.warning(f"Stylesheet: {warning}")

            rules = parse_result.rules
            mappings = NodeMapper(self.options).build_mappings(tree, rules)
            conflicts = ConflictDetector(self.options).detect(mappings, tree)

            total_nodes = count_nodes(tree)
            coverage = len(mappings) / total_nodes if total_nodes else 0.0
            suggestions = self.generate_suggestions(mappings, conflicts, coverage)

            result = EnhancementResult(
                mappings=mappings,
                coverage=coverage,
                conflicts=conflicts,
                suggestions=suggestions,
                statistics=EnhancementStatistics(
                    total_nodes=total_nodes,
                    mapped_nodes=len(mappings),
                    rule_count=len(rules),
                    conflict_count=len(conflicts),
                ),
                parse_warnings=list(parse_result.warnings),
            )
            result.statistics.processing_time_ms = timer.elapsed_ms

        logger.info(
            f"Enhanced {total_nodes} nodes with {len(rules)} rules: "
            f"{len(mappings)} mapped ({coverage:.0%}), {len(conflicts)} conflicts",
            extra={"node_count": total_nodes, "rule_count": len(rules)},
        )
        return result

    def generate_suggestions(
        self,
        mappings: list[NodeStyleMapping],
        conflicts: list[StyleConflict],
        coverage: float,
    ) -> list[str]:
        """Rule-based suggestions, trimmed to ``max_suggestions``."""
        suggestions = []

        if not mappings:
            suggestions.append(SUGGEST_SELECTOR_TUNING)
        elif coverage < LOW_COVERAGE_THRESHOLD:
            suggestions.append(SUGGEST_MAPPING_STRATEGY)

        high_severity = [c for c in conflicts if c.severity is ConflictSeverity.HIGH]
        if high_severity:
            suggestions.append(
                f"{len(high_severity)} high-severity conflicts found. "
                "Review color and typography differences."
            )

        low_confidence = [
            m for m in mappings if m.confidence < LOW_CONFIDENCE_THRESHOLD
        ]
        if len(low_confidence) > len(mappings) * 0.5:
            suggestions.append(SUGGEST_STRATEGY_SWITCH)

        return suggestions[: self.options.max_suggestions]


def enhance(
    tree: DesignNode | dict[str, Any] | None,
    style_text: str | bytes | None,
    options: EnhancementOptions | None = None,
) -> EnhancementResult:
    """Convenience function to run one enhancement."""
    return CSSEnhancer(options).enhance(tree, style_text)
