"""Unit tests for design tree models and loading."""

import pytest

from css_enhancer.design import (
    DesignNode,
    Effect,
    RGBAColor,
    count_nodes,
    iter_nodes,
    load_design_tree,
)
from css_enhancer.errors import DesignTreeError


class TestRGBAColor:
    """Tests for RGBAColor."""

    def test_to_css(self):
        """Test channel scaling and rounding."""
        assert RGBAColor(1, 0, 0).to_css() == "rgb(255, 0, 0)"
        assert RGBAColor(0, 0.4, 1).to_css() == "rgb(0, 102, 255)"

    def test_to_css_with_opacity(self):
        """Test that paint opacity multiplies the color alpha."""
        assert RGBAColor(0, 0, 0, 0.5).to_css(opacity=0.5) == "rgba(0, 0, 0, 0.25)"


class TestDesignNode:
    """Tests for DesignNode.from_dict and accessors."""

    def test_minimal_node(self):
        """Test defaults for a node with only an id."""
        node = DesignNode.from_dict({"id": "1:1"})

        assert node.id == "1:1"
        assert node.name == ""
        assert node.type == "FRAME"
        assert node.children == ()
        assert node.style is None
        assert node.solid_fill_color() is None

    def test_solid_fill_color(self):
        """Test that the first visible SOLID fill is used."""
        node = DesignNode.from_dict(
            {
                "id": "1",
                "fills": [
                    {"type": "GRADIENT_LINEAR"},
                    {"type": "SOLID", "visible": False, "color": {"r": 1, "g": 1, "b": 1}},
                    {"type": "SOLID", "color": {"r": 0, "g": 0, "b": 1}},
                ],
            }
        )

        assert node.solid_fill_color() == "rgb(0, 0, 255)"

    def test_stroke_and_shadow(self):
        """Test stroke color and first visible shadow lookup."""
        node = DesignNode.from_dict(
            {
                "id": "1",
                "strokes": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0}}],
                "effects": [
                    {"type": "LAYER_BLUR", "radius": 4},
                    {
                        "type": "DROP_SHADOW",
                        "radius": 4,
                        "offset": {"x": 0, "y": 2},
                        "color": {"r": 0, "g": 0, "b": 0, "a": 0.25},
                    },
                ],
            }
        )

        assert node.solid_stroke_color() == "rgb(0, 0, 0)"
        shadow = node.first_shadow()
        assert shadow is not None
        assert shadow.to_css() == "0px 2px 4px rgba(0, 0, 0, 0.25)"

    def test_inner_shadow_css(self):
        effect = Effect(type="INNER_SHADOW", radius=2, offset_x=1, offset_y=1)

        assert effect.to_css() == "inset 1px 1px 2px"

    def test_typography_and_layout(self, design_tree):
        """Test that style, box and auto-layout attributes are read."""
        nodes = {node.id: node for node in iter_nodes(design_tree)}

        title = nodes["1:2"]
        assert title.style.font_size == 32
        assert title.style.font_family == "Inter"
        assert title.style.line_height_px == 40

        header = nodes["1:1"]
        assert header.bounding_box.width == 1200

        button = nodes["2:1"]
        assert button.item_spacing == 8
        assert button.paddings() == (8, 16, 8, 16)
        assert button.corner_radius == 4

    def test_partial_padding(self):
        """Test that paddings() needs all four sides."""
        node = DesignNode.from_dict({"id": "1", "paddingTop": 4})

        assert node.paddings() is None

    def test_round_trip(self, design_tree):
        """Test that to_dict output loads back into an equal tree."""
        assert DesignNode.from_dict(design_tree.to_dict()) == design_tree

    def test_missing_id(self):
        """Test that a node without an id is rejected with its path."""
        with pytest.raises(DesignTreeError) as exc_info:
            DesignNode.from_dict({"id": "0", "children": [{"name": "Orphan"}]})

        assert "missing an id" in exc_info.value.message
        assert exc_info.value.details == {"node": "document/0"}

    def test_children_not_a_list(self):
        with pytest.raises(DesignTreeError):
            DesignNode.from_dict({"id": "0", "children": {"id": "1"}})

    def test_bad_attribute_value(self):
        """Test that unconvertible values raise DesignTreeError."""
        with pytest.raises(DesignTreeError):
            DesignNode.from_dict({"id": "0", "itemSpacing": "wide"})

    @pytest.mark.parametrize(
        "attributes",
        [
            {"itemSpacing": float("inf")},
            {"style": {"fontSize": float("nan")}},
            {"fills": [{"type": "SOLID", "color": {"r": float("nan")}}]},
            {"absoluteBoundingBox": {"width": float("inf")}},
        ],
    )
    def test_non_finite_numbers_rejected(self, attributes):
        """Test that NaN and infinite design values raise DesignTreeError."""
        with pytest.raises(DesignTreeError, match="finite"):
            DesignNode.from_dict({"id": "0", **attributes})

    def test_fills_must_be_objects(self):
        with pytest.raises(DesignTreeError):
            DesignNode.from_dict({"id": "0", "fills": ["red"]})


class TestLoadDesignTree:
    """Tests for load_design_tree."""

    def test_file_response(self, sample_design):
        tree = load_design_tree(sample_design)

        assert tree.id == "0:0"
        assert len(tree.children) == 3

    def test_nodes_response(self):
        """Test the single-node response shape."""
        tree = load_design_tree(
            {"nodes": {"1:1": {"document": {"id": "1:1", "name": "Header"}}}}
        )

        assert tree.name == "Header"

    def test_bare_node(self):
        assert load_design_tree({"id": "5", "name": "Card"}).name == "Card"

    def test_empty(self):
        """Test that None or an empty object is an empty tree."""
        assert load_design_tree(None) is None
        assert load_design_tree({}) is None

    def test_not_an_object(self):
        with pytest.raises(DesignTreeError):
            load_design_tree(["not", "a", "node"])

    def test_multiple_nodes_rejected(self):
        with pytest.raises(DesignTreeError):
            load_design_tree(
                {"nodes": {"1": {"document": {"id": "1"}}, "2": {"document": {"id": "2"}}}}
            )


class TestTraversal:
    """Tests for iter_nodes and count_nodes."""

    def test_pre_order(self, design_tree):
        """Test depth-first pre-order in document order."""
        assert [node.id for node in iter_nodes(design_tree)] == [
            "0:0",
            "1:1",
            "1:2",
            "2:1",
            "3:1",
        ]

    def test_count(self, design_tree):
        assert count_nodes(design_tree) == 5
        assert count_nodes(None) == 0
        assert list(iter_nodes(None)) == []
