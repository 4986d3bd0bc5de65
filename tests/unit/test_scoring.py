"""Unit tests for match scoring."""

import pytest

from css_enhancer.config import EnhancementOptions
from css_enhancer.design import DesignNode
from css_enhancer.models import MatchStrategy, StyleDeclaration, StyleRule
from css_enhancer.scoring import (
    MatchScorer,
    class_score,
    id_score,
    is_color_property,
    name_score,
    strategy_score,
    tokenize_name,
    tokenize_selector,
)


def make_rule(selector: str, **declarations: str) -> StyleRule:
    return StyleRule(
        selector=selector,
        declarations=tuple(
            StyleDeclaration(prop.replace("_", "-"), value)
            for prop, value in declarations.items()
        ),
        specificity=0,
    )


class TestTokenizing:
    """Tests for name and selector tokenizers."""

    def test_name_tokens(self):
        assert tokenize_name("Primary Button") == ["primary", "button"]
        assert tokenize_name("nav_bar-item") == ["nav", "bar", "item"]
        assert tokenize_name("") == []

    def test_selector_tokens(self):
        """Test that . and # separate tokens and empty tokens are dropped."""
        assert tokenize_selector(".btn-primary") == ["btn", "primary"]
        assert tokenize_selector("#hero.title") == ["hero", "title"]


class TestSubScores:
    """Tests for name, class and id sub-scores."""

    def test_name_score_exact(self):
        assert name_score("Header", ".header") == 1.0

    def test_name_score_partial(self):
        """Test division by the larger token count."""
        assert name_score("Primary Button", ".btn-primary") == 0.5

    def test_name_score_substring(self):
        """Test that containment in either direction counts."""
        assert name_score("Nav", ".navigation") == 1.0
        assert name_score("Navigation", ".nav") == 1.0

    def test_name_score_empty(self):
        assert name_score("", ".header") == 0.0
        assert name_score("Header", "") == 0.0

    def test_class_score(self):
        assert class_score("Header", ".header") == 1.0
        assert class_score("Primary Button", ".btn-primary") == 0.5
        assert class_score("Header", "#header") == 0.0

    def test_id_score(self):
        assert id_score("Hero Title", "#hero-title") == 0.5
        assert id_score("Header", ".header") == 0.0

    def test_no_match(self):
        assert name_score("Footer", ".header") == 0.0
        assert class_score("Footer", ".header") == 0.0


class TestStrategyScore:
    """Tests for strategy-weighted scores."""

    def test_hybrid_weights(self):
        """Test 0.4 name + 0.4 class + 0.2 id."""
        assert strategy_score("Header", ".header", MatchStrategy.HYBRID) == pytest.approx(0.8)
        assert strategy_score(
            "Primary Button", ".btn-primary", MatchStrategy.HYBRID
        ) == pytest.approx(0.4)
        assert strategy_score(
            "Hero Title", "#hero-title", MatchStrategy.HYBRID
        ) == pytest.approx(0.5)

    @pytest.mark.parametrize(
        "strategy,expected",
        [
            (MatchStrategy.NAME, 1.0),
            (MatchStrategy.CLASS, 0.0),
            (MatchStrategy.ID, 0.5),
        ],
    )
    def test_single_strategies(self, strategy, expected):
        assert strategy_score("Hero Title", "#hero-title", strategy) == expected


class TestIsColorProperty:
    """Tests for is_color_property."""

    def test_color_like(self):
        for prop in ("color", "background", "background-color", "border-color"):
            assert is_color_property(prop)

    def test_not_color_like(self):
        for prop in ("font-size", "margin", "border-radius"):
            assert not is_color_property(prop)


class TestMatchScorer:
    """Tests for MatchScorer."""

    def test_score_without_style_checks(self):
        """Test that a node with no attributes gets only the name score."""
        node = DesignNode(id="1", name="Header")
        rule = make_rule(".header", color="rgb(255, 0, 0)", font_size="18px")

        assert MatchScorer().score(node, rule) == pytest.approx(0.8)

    def test_color_bonus(self):
        """Test the bonus when the declared color equals the fill."""
        node = DesignNode.from_dict(
            {"id": "1", "name": "Header", "fills": [{"type": "SOLID", "color": {"r": 1, "g": 0, "b": 0}}]}
        )
        matching = make_rule(".header", color="#f00")
        different = make_rule(".header", color="#00f")

        scorer = MatchScorer()
        assert scorer.style_similarity(node, matching) == pytest.approx(0.3)
        assert scorer.style_similarity(node, different) == 0.0

    def test_color_bonus_ignored(self):
        node = DesignNode.from_dict(
            {"id": "1", "fills": [{"type": "SOLID", "color": {"r": 1, "g": 0, "b": 0}}]}
        )
        rule = make_rule(".x", color="red")

        scorer = MatchScorer(EnhancementOptions(ignore_colors=True))
        assert scorer.style_similarity(node, rule) == 0.0

    def test_typography_bonus_averaged(self):
        """Test that every typography property counts as a check."""
        node = DesignNode.from_dict({"id": "1", "style": {"fontSize": 16}})
        rule = make_rule(".x", font_size="17px", font_weight="bold")

        # 0.2 bonus over two checks
        assert MatchScorer().style_similarity(node, rule) == pytest.approx(0.1)

    def test_typography_outside_tolerance(self):
        node = DesignNode.from_dict({"id": "1", "style": {"fontSize": 16}})
        rule = make_rule(".x", font_size="20px")

        assert MatchScorer().style_similarity(node, rule) == 0.0

    def test_spacing_bonus(self):
        node = DesignNode.from_dict(
            {"id": "1", "absoluteBoundingBox": {"x": 0, "y": 0, "width": 100, "height": 40}}
        )
        rule = make_rule(".x", width="102px")

        assert MatchScorer().style_similarity(node, rule) == pytest.approx(0.1)

    def test_no_applicable_checks(self):
        """Test that similarity is zero when no check applies."""
        node = DesignNode(id="1")
        rule = make_rule(".x", display="flex")

        assert MatchScorer().style_similarity(node, rule) == 0.0

    def test_style_only_match(self):
        """Test that a style match alone makes a rule a candidate."""
        node = DesignNode.from_dict(
            {"id": "1", "name": "Box", "fills": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0}}]}
        )
        rule = make_rule(".unrelated", background="#000")

        ranked = MatchScorer().rank(node, [rule])
        assert ranked == [(rule, pytest.approx(0.3))]

    def test_rank_descending_and_stable(self):
        """Test that ranking is by score with ties in parse order."""
        node = DesignNode(id="1", name="Card Title")
        first = make_rule(".card", margin="0")
        second = make_rule(".title", margin="0")
        best = make_rule(".card-title", margin="0")
        unrelated = make_rule(".footer", margin="0")

        ranked = MatchScorer().rank(node, [first, second, best, unrelated])

        assert [rule for rule, _ in ranked] == [best, first, second]
        assert ranked[1][1] == ranked[2][1]

    def test_rank_uses_strategy(self):
        """Test that the id strategy ignores class selectors."""
        node = DesignNode(id="1", name="Header")
        rule = make_rule(".header", margin="0")

        scorer = MatchScorer(EnhancementOptions(mapping_strategy=MatchStrategy.ID))
        assert scorer.rank(node, [rule]) == []
