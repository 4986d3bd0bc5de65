"""Node-to-rule mapping.

Walks the design tree depth-first pre-order, ranks every rule for each
node with MatchScorer, and keeps a mapping when its confidence reaches
the configured threshold. Traversal and rule order are both stable, so
unchanged input always produces identical mappings.
"""

from .config import EnhancementOptions
from .design import DesignNode, iter_nodes
from .enhancer_logging import LogCategory, get_category_logger
from .models import MappingMethod, NodeStyleMapping, StyleRule
from .scoring import MatchScorer
from .timing import timed

logger = get_category_logger(LogCategory.MAPPER)

GENERIC_SELECTORS = frozenset(["div", "span", "p", "h1", "h2", "h3"])

NAME_MATCH_BOOST = 1.2
GENERIC_SELECTOR_PENALTY = 0.8


def selector_contains_name(selector: str, node_name: str) -> bool:
    """Case-insensitive containment; an empty name never matches."""
    return bool(node_name) and node_name.lower() in selector.lower()


def is_generic_selector(selector: str) -> bool:
    return selector.strip().lower() in GENERIC_SELECTORS


class NodeMapper:
    """Builds NodeStyleMapping records for a design tree."""

    def __init__(
        self,
        options: EnhancementOptions | None = None,
        scorer: MatchScorer | None = None,
    ):
        self.options = options or EnhancementOptions()
        self.scorer = scorer or MatchScorer(self.options)

    @timed("build_mappings")
    def build_mappings(
        self, tree: DesignNode | None, rules: list[StyleRule]
    ) -> list[NodeStyleMapping]:
        """Map every node of the tree to its best-matching rules.

        Nodes with no candidate rule, or whose confidence falls below
        ``min_confidence``, are left out entirely.
        """
        mappings = []
        visited = 0
        for node in iter_nodes(tree):
            visited += 1
            mapping = self.map_node(node, rules)
            if mapping is not None:
                mappings.append(mapping)

        logger.debug(
            f"Mapped {len(mappings)}/{visited} nodes against {len(rules)} rules",
            extra={"node_count": visited, "rule_count": len(rules)},
        )
        return mappings

    def map_node(
        self, node: DesignNode, rules: list[StyleRule]
    ) -> NodeStyleMapping | None:
        """Build the mapping for one node, or None if it is not accepted."""
        ranked = self.scorer.rank(node, rules)
        if not ranked:
            return None

        candidates = [rule for rule, _ in ranked]
        scores = [score for _, score in ranked]
        confidence = self.confidence(node, candidates, scores)
        if confidence < self.options.min_confidence:
            logger.debug(
                f"Discarded mapping for {node.name!r} ({node.id}): "
                f"confidence {confidence:.2f} < {self.options.min_confidence:.2f}"
            )
            return None

        return NodeStyleMapping(
            node_id=node.id,
            node_name=node.name,
            node_type=node.type,
            matched_rules=candidates,
            scores=scores,
            confidence=confidence,
            method=self.mapping_method(node, candidates[0]),
            node=node,
        )

    def confidence(
        self, node: DesignNode, candidates: list[StyleRule], scores: list[float]
    ) -> float:
        """Mean candidate score adjusted by selector shape, clipped to [0, 1].

        The name-match boost is capped at 1 before the generic-selector
        penalty applies, so a generic selector always costs the full 20%.
        """
        confidence = sum(scores) / len(scores)

        if any(selector_contains_name(rule.selector, node.name) for rule in candidates):
            confidence = min(confidence * NAME_MATCH_BOOST, 1.0)

        if any(is_generic_selector(rule.selector) for rule in candidates):
            confidence *= GENERIC_SELECTOR_PENALTY

        return max(0.0, min(confidence, 1.0))

    def mapping_method(self, node: DesignNode, top_rule: StyleRule) -> MappingMethod:
        """Classify a mapping by the shape of its best rule's selector."""
        selector = top_rule.selector
        if "#" in selector:
            return MappingMethod.ID
        if "." in selector:
            return MappingMethod.CLASS
        if selector_contains_name(selector, node.name):
            return MappingMethod.NAME
        if self.options.enable_auto_mapping:
            return MappingMethod.AUTO
        return MappingMethod.MANUAL
