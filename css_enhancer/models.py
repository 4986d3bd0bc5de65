"""Data models for stylesheet enhancement.

This module defines the records that flow through the enhancement
pipeline: parsed stylesheet rules, node-to-rule mappings, detected
style conflicts, and the final enhancement result. Result records
serialize with camelCase keys so they can be handed unmodified to a
rendering layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .design import DesignNode


class MatchStrategy(Enum):
    """How node names are matched against selectors."""

    NAME = "name"
    CLASS = "class"
    ID = "id"
    HYBRID = "hybrid"


class MappingMethod(Enum):
    """Selector shape that produced a node mapping."""

    ID = "id"
    CLASS = "class"
    NAME = "name"
    AUTO = "auto"
    MANUAL = "manual"


class ConflictKind(Enum):
    """Visual property family a conflict belongs to."""

    COLOR = "color"
    TYPOGRAPHY = "typography"
    SPACING = "spacing"
    LAYOUT = "layout"
    EFFECTS = "effects"


class ConflictSeverity(Enum):
    """Severity levels for style conflicts."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class StyleDeclaration:
    """A single ``property: value`` pair from a rule body."""

    property: str
    value: str
    important: bool = False
    source_line: int = 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "property": self.property,
            "value": self.value,
            "important": self.important,
            "sourceLine": self.source_line,
        }


@dataclass(frozen=True)
class StyleRule:
    """A parsed selector with its declarations, in source order."""

    selector: str
    declarations: tuple[StyleDeclaration, ...]
    specificity: int
    source_line: int = 1
    source_column: int = 1

    def get(self, prop: str) -> str | None:
        """Return the last declared value for a property, if any."""
        value = None
        for declaration in self.declarations:
            if declaration.property == prop:
                value = declaration.value
        return value

    @property
    def properties(self) -> list[str]:
        return [d.property for d in self.declarations]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "selector": self.selector,
            "declarations": [d.to_dict() for d in self.declarations],
            "specificity": self.specificity,
            "sourceLine": self.source_line,
            "sourceColumn": self.source_column,
        }


@dataclass
class ParseStatistics:
    """Counters collected while scanning a stylesheet."""

    total_rules: int = 0
    total_declarations: int = 0
    total_selectors: int = 0
    processing_time_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "totalRules": self.total_rules,
            "totalDeclarations": self.total_declarations,
            "totalSelectors": self.total_selectors,
            "processingTimeMs": self.processing_time_ms,
        }


@dataclass
class StylesheetSummary:
    """Design-token inventory of a stylesheet.

    Every list holds distinct values in first-seen order. Colors are
    canonical literals; the other values are kept as declared.
    ``layers`` maps a selector to the design layer its class names.
    """

    variables: dict[str, str] = field(default_factory=dict)
    colors: list[str] = field(default_factory=list)
    fonts: list[str] = field(default_factory=list)
    spacing: list[str] = field(default_factory=list)
    border_radii: list[str] = field(default_factory=list)
    shadows: list[str] = field(default_factory=list)
    animations: list[str] = field(default_factory=list)
    components: list[str] = field(default_factory=list)
    layers: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "variables": dict(self.variables),
            "colors": list(self.colors),
            "fonts": list(self.fonts),
            "spacing": list(self.spacing),
            "borderRadii": list(self.border_radii),
            "shadows": list(self.shadows),
            "animations": list(self.animations),
            "components": list(self.components),
            "layers": dict(self.layers),
        }


@dataclass
class ParseResult:
    """Outcome of parsing a stylesheet.

    ``is_valid`` is only False after an internal failure; malformed CSS
    produces fewer rules and entries in ``warnings`` instead.
    """

    rules: list[StyleRule] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    statistics: ParseStatistics = field(default_factory=ParseStatistics)
    is_valid: bool = True
    summary: StylesheetSummary = field(default_factory=StylesheetSummary)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "rules": [rule.to_dict() for rule in self.rules],
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "statistics": self.statistics.to_dict(),
            "isValid": self.is_valid,
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class StyleConflict:
    """A mismatch between a node's design value and a stylesheet value."""

    kind: ConflictKind
    property: str
    design_value: str
    css_value: str
    severity: ConflictSeverity
    suggestion: str
    node_id: str | None = None
    selector: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "property": self.property,
            "designValue": self.design_value,
            "cssValue": self.css_value,
            "severity": self.severity.value,
            "suggestion": self.suggestion,
            "nodeId": self.node_id,
            "selector": self.selector,
        }


@dataclass
class NodeStyleMapping:
    """Association between one design node and its best-matching rules.

    ``matched_rules`` is never empty and is ordered best-first;
    ``scores`` holds the match score of each rule in the same order.
    ``node`` is the design node that was scored; it is not serialized.
    """

    node_id: str
    node_name: str
    node_type: str
    matched_rules: list[StyleRule]
    scores: list[float]
    confidence: float
    method: MappingMethod
    conflicts: list[StyleConflict] = field(default_factory=list)
    node: DesignNode | None = field(default=None, repr=False, compare=False)

    @property
    def top_rule(self) -> StyleRule:
        return self.matched_rules[0]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "nodeId": self.node_id,
            "nodeName": self.node_name,
            "nodeType": self.node_type,
            "matchedRules": [rule.to_dict() for rule in self.matched_rules],
            "scores": list(self.scores),
            "confidence": self.confidence,
            "method": self.method.value,
            "conflicts": [c.to_dict() for c in self.conflicts],
        }


@dataclass
class EnhancementStatistics:
    """Summary counters for one enhancement run."""

    total_nodes: int = 0
    mapped_nodes: int = 0
    rule_count: int = 0
    conflict_count: int = 0
    processing_time_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "totalNodes": self.total_nodes,
            "mappedNodes": self.mapped_nodes,
            "ruleCount": self.rule_count,
            "conflictCount": self.conflict_count,
            "processingTimeMs": self.processing_time_ms,
        }


@dataclass
class EnhancementResult:
    """Complete result of enhancing a design tree with a stylesheet."""

    mappings: list[NodeStyleMapping] = field(default_factory=list)
    coverage: float = 0.0
    conflicts: list[StyleConflict] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    statistics: EnhancementStatistics = field(default_factory=EnhancementStatistics)
    parse_warnings: list[str] = field(default_factory=list)

    @property
    def high_severity_count(self) -> int:
        return sum(1 for c in self.conflicts if c.severity is ConflictSeverity.HIGH)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "mappings": [m.to_dict() for m in self.mappings],
            "coverage": self.coverage,
            "conflicts": [c.to_dict() for c in self.conflicts],
            "suggestions": list(self.suggestions),
            "statistics": self.statistics.to_dict(),
            "parseWarnings": list(self.parse_warnings),
        }
