"""Stylesheet-to-design enhancement.

This package associates CSS rules with the nodes of a design tree,
scores how confident each association is, and flags differences
between declared stylesheet values and the design's own values.

Main components:
- parser: StylesheetParser turning CSS text into StyleRules
- summary: design-token inventory of the parsed rules
- scoring: MatchScorer rating (node, rule) pairs
- mapper: NodeMapper building per-node mappings with confidence
- conflicts: ConflictDetector comparing design and CSS values
- enhancer: CSSEnhancer running the whole pipeline
- worker: EnhancementWorker running tasks on a thread pool
"""

__version__ = "0.1.0"

from .config import EnhancementOptions, OptionsLoader, load_options
from .conflicts import ConflictDetector, detect_conflicts
from .design import DesignNode, iter_nodes, load_design_tree
from .enhancer import CSSEnhancer, enhance
from .errors import (
    ConfigurationError,
    DesignTreeError,
    EnhancerError,
    ErrorCategory,
    StylesheetParseError,
)
from .mapper import NodeMapper
from .models import (
    ConflictKind,
    ConflictSeverity,
    EnhancementResult,
    EnhancementStatistics,
    MappingMethod,
    MatchStrategy,
    NodeStyleMapping,
    ParseResult,
    ParseStatistics,
    StyleConflict,
    StyleDeclaration,
    StyleRule,
    StylesheetSummary,
)
from .parser import StylesheetParser, calculate_specificity, parse_stylesheet
from .scoring import MatchScorer
from .summary import summarize_rules
from .worker import EnhancementTask, EnhancementWorker, TaskResult

__all__ = [
    "__version__",
    # Models
    "MatchStrategy",
    "MappingMethod",
    "ConflictKind",
    "ConflictSeverity",
    "StyleDeclaration",
    "StyleRule",
    "ParseStatistics",
    "ParseResult",
    "StylesheetSummary",
    "StyleConflict",
    "NodeStyleMapping",
    "EnhancementStatistics",
    "EnhancementResult",
    # Design tree
    "DesignNode",
    "iter_nodes",
    "load_design_tree",
    # Pipeline
    "StylesheetParser",
    "calculate_specificity",
    "parse_stylesheet",
    "summarize_rules",
    "MatchScorer",
    "NodeMapper",
    "ConflictDetector",
    "detect_conflicts",
    "CSSEnhancer",
    "enhance",
    "EnhancementWorker",
    "EnhancementTask",
    "TaskResult",
    # Options
    "EnhancementOptions",
    "OptionsLoader",
    "load_options",
    # Errors
    "EnhancerError",
    "ErrorCategory",
    "StylesheetParseError",
    "DesignTreeError",
    "ConfigurationError",
]
