"""Match scoring between design nodes and stylesheet rules.

A rule's score for a node is a name-similarity score (combined according
to the mapping strategy) plus a small style-similarity bonus when the
rule's declared values agree with the node's design values. All
functions here are pure; MatchScorer only binds the options.
"""

import re

from .config import EnhancementOptions
from .design import DesignNode
from .models import MatchStrategy, StyleDeclaration, StyleRule
from .normalizers import extract_css_color, parse_length

NAME_SEPARATOR_RE = re.compile(r"[-_\s]+")
SELECTOR_SEPARATOR_RE = re.compile(r"[-_\s.#]+")
CLASS_TOKEN_RE = re.compile(r"\.([a-z][a-z0-9_-]*)")
ID_TOKEN_RE = re.compile(r"#([a-z][a-z0-9_-]*)")

HYBRID_WEIGHTS = {"name": 0.4, "class": 0.4, "id": 0.2}

TYPOGRAPHY_PROPERTIES = ("font-size", "font-weight", "font-family", "line-height")
SPACING_PROPERTIES = ("margin", "padding", "gap", "width", "height")

COLOR_BONUS = 0.3
TYPOGRAPHY_BONUS = 0.2
SPACING_BONUS = 0.1
FONT_SIZE_TOLERANCE_PX = 2.0
WIDTH_TOLERANCE_PX = 5.0


def tokenize_name(name: str) -> list[str]:
    """Lowercase word tokens of a node name."""
    return [token for token in NAME_SEPARATOR_RE.split(name.lower()) if token]


def tokenize_selector(selector: str) -> list[str]:
    """Lowercase word tokens of a selector, with ``.`` and ``#`` as separators."""
    return [token for token in SELECTOR_SEPARATOR_RE.split(selector.lower()) if token]


def _related(a: str, b: str) -> bool:
    return a in b or b in a


def _identifier_score(identifiers: list[str], name_tokens: list[str]) -> float:
    denominator = max(len(identifiers), len(name_tokens))
    if not identifiers or not name_tokens:
        return 0.0
    matches = sum(
        1
        for ident in identifiers
        if any(_related(ident, word) for word in name_tokens)
    )
    return matches / denominator


def name_score(node_name: str, selector: str) -> float:
    """Fraction of name tokens related to some selector token.

    A token is related when either one contains the other. The count is
    divided by the larger of the two token counts.
    """
    name_tokens = tokenize_name(node_name)
    selector_tokens = tokenize_selector(selector)
    if not name_tokens or not selector_tokens:
        return 0.0
    matches = sum(
        1
        for word in name_tokens
        if any(_related(word, token) for token in selector_tokens)
    )
    return matches / max(len(name_tokens), len(selector_tokens))


def class_score(node_name: str, selector: str) -> float:
    """Fraction of ``.class`` tokens related to a name token."""
    classes = CLASS_TOKEN_RE.findall(selector.lower())
    return _identifier_score(classes, tokenize_name(node_name))


def id_score(node_name: str, selector: str) -> float:
    """Fraction of ``#id`` tokens related to a name token."""
    ids = ID_TOKEN_RE.findall(selector.lower())
    return _identifier_score(ids, tokenize_name(node_name))


def strategy_score(node_name: str, selector: str, strategy: MatchStrategy) -> float:
    """Combine the name, class and id scores for a strategy."""
    if strategy is MatchStrategy.NAME:
        return name_score(node_name, selector)
    if strategy is MatchStrategy.CLASS:
        return class_score(node_name, selector)
    if strategy is MatchStrategy.ID:
        return id_score(node_name, selector)
    return (
        name_score(node_name, selector) * HYBRID_WEIGHTS["name"]
        + class_score(node_name, selector) * HYBRID_WEIGHTS["class"]
        + id_score(node_name, selector) * HYBRID_WEIGHTS["id"]
    )


def is_color_property(prop: str) -> bool:
    return "color" in prop or "background" in prop


class MatchScorer:
    """Scores (node, rule) pairs under a fixed set of options."""

    def __init__(self, options: EnhancementOptions | None = None):
        self.options = options or EnhancementOptions()

    def score(self, node: DesignNode, rule: StyleRule) -> float:
        """Total match score of a rule for a node (>= 0)."""
        base = strategy_score(node.name, rule.selector, self.options.mapping_strategy)
        return base + self.style_similarity(node, rule)

    def rank(
        self, node: DesignNode, rules: list[StyleRule]
    ) -> list[tuple[StyleRule, float]]:
        """Candidate rules for a node, best first.

        Rules scoring 0 are dropped. The sort is stable, so equal scores
        keep their parse order.
        """
        scored = [(rule, self.score(node, rule)) for rule in rules]
        candidates = [(rule, score) for rule, score in scored if score > 0]
        return sorted(candidates, key=lambda pair: pair[1], reverse=True)

    def style_similarity(self, node: DesignNode, rule: StyleRule) -> float:
        """Average bonus over the property checks that apply to this node.

        Returns 0 when no check applies.
        """
        total = 0.0
        checks = 0

        fill_color = None if self.options.ignore_colors else node.solid_fill_color()
        if fill_color is not None:
            for declaration in rule.declarations:
                if not is_color_property(declaration.property):
                    continue
                checks += 1
                if extract_css_color(declaration.value) == fill_color:
                    total += COLOR_BONUS

        if not self.options.ignore_typography and node.style is not None:
            for declaration in rule.declarations:
                if declaration.property not in TYPOGRAPHY_PROPERTIES:
                    continue
                checks += 1
                if self._font_size_similar(node, declaration):
                    total += TYPOGRAPHY_BONUS

        if not self.options.ignore_spacing and node.bounding_box is not None:
            for declaration in rule.declarations:
                if declaration.property not in SPACING_PROPERTIES:
                    continue
                checks += 1
                if self._width_similar(node, declaration):
                    total += SPACING_BONUS

        return total / checks if checks else 0.0

    @staticmethod
    def _font_size_similar(node: DesignNode, declaration: StyleDeclaration) -> bool:
        # Other typography properties only count as a check
        if declaration.property != "font-size" or node.style.font_size is None:
            return False
        css_size = parse_length(declaration.value)
        if css_size is None:
            return False
        return abs(node.style.font_size - css_size) < FONT_SIZE_TOLERANCE_PX

    @staticmethod
    def _width_similar(node: DesignNode, declaration: StyleDeclaration) -> bool:
        if declaration.property != "width":
            return False
        css_width = parse_length(declaration.value)
        if css_width is None:
            return False
        return abs(node.bounding_box.width - css_width) < WIDTH_TOLERANCE_PX
