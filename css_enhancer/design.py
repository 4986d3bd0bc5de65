"""Design tree models for the CSS enhancer.

This module defines typed records for the nodes of a visual-design
document (as returned by the Figma file API): paints, text styles,
geometry and auto-layout attributes. Raw JSON is validated once, when
the tree is built, so the rest of the pipeline never touches untyped
dictionaries.
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from .errors import DesignTreeError
from .normalizers import format_color, format_px


@dataclass(frozen=True)
class RGBAColor:
    """A color with channels in the 0..1 range, as stored in design files."""

    r: float
    g: float
    b: float
    a: float = 1.0

    def to_css(self, opacity: float = 1.0) -> str:
        """Render as an ``rgb()``/``rgba()`` literal."""
        return format_color(
            round(self.r * 255),
            round(self.g * 255),
            round(self.b * 255),
            self.a * opacity,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"r": self.r, "g": self.g, "b": self.b, "a": self.a}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RGBAColor":
        """Create from dictionary."""
        return cls(
            r=_finite(data.get("r", 0.0)),
            g=_finite(data.get("g", 0.0)),
            b=_finite(data.get("b", 0.0)),
            a=_finite(data.get("a", 1.0)),
        )


@dataclass(frozen=True)
class Paint:
    """A fill or stroke paint. Only SOLID paints carry a color."""

    type: str
    color: RGBAColor | None = None
    opacity: float = 1.0
    visible: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "type": self.type,
            "opacity": self.opacity,
            "visible": self.visible,
        }
        if self.color is not None:
            result["color"] = self.color.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Paint":
        """Create from dictionary."""
        color = data.get("color")
        return cls(
            type=str(data.get("type", "SOLID")),
            color=RGBAColor.from_dict(color) if isinstance(color, dict) else None,
            opacity=_finite(data.get("opacity", 1.0)),
            visible=bool(data.get("visible", True)),
        )


@dataclass(frozen=True)
class Effect:
    """A layer effect such as a drop shadow or blur."""

    type: str
    visible: bool = True
    radius: float = 0.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    color: RGBAColor | None = None

    @property
    def is_shadow(self) -> bool:
        return self.type in ("DROP_SHADOW", "INNER_SHADOW")

    def to_css(self) -> str:
        """Render a shadow effect as a box-shadow value."""
        parts = [
            format_px(self.offset_x),
            format_px(self.offset_y),
            format_px(self.radius),
        ]
        if self.color is not None:
            parts.append(self.color.to_css())
        if self.type == "INNER_SHADOW":
            parts.insert(0, "inset")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "type": self.type,
            "visible": self.visible,
            "radius": self.radius,
            "offset": {"x": self.offset_x, "y": self.offset_y},
        }
        if self.color is not None:
            result["color"] = self.color.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Effect":
        """Create from dictionary."""
        offset = data.get("offset") or {}
        color = data.get("color")
        return cls(
            type=str(data.get("type", "")),
            visible=bool(data.get("visible", True)),
            radius=_finite(data.get("radius", 0.0)),
            offset_x=_finite(offset.get("x", 0.0)),
            offset_y=_finite(offset.get("y", 0.0)),
            color=RGBAColor.from_dict(color) if isinstance(color, dict) else None,
        )


@dataclass(frozen=True)
class TypeStyle:
    """Typography attributes of a text node."""

    font_family: str | None = None
    font_weight: float | None = None
    font_size: float | None = None
    line_height_px: float | None = None
    letter_spacing: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "fontFamily": self.font_family,
            "fontWeight": self.font_weight,
            "fontSize": self.font_size,
            "lineHeightPx": self.line_height_px,
            "letterSpacing": self.letter_spacing,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TypeStyle":
        """Create from dictionary."""
        return cls(
            font_family=data.get("fontFamily"),
            font_weight=_optional_float(data.get("fontWeight")),
            font_size=_optional_float(data.get("fontSize")),
            line_height_px=_optional_float(data.get("lineHeightPx")),
            letter_spacing=_optional_float(data.get("letterSpacing")),
        )


@dataclass(frozen=True)
class BoundingBox:
    """Absolute bounding box of a node, in pixels."""

    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BoundingBox":
        """Create from dictionary."""
        return cls(
            x=_finite(data.get("x", 0.0)),
            y=_finite(data.get("y", 0.0)),
            width=_finite(data.get("width", 0.0)),
            height=_finite(data.get("height", 0.0)),
        )


@dataclass(frozen=True)
class DesignNode:
    """One element of the design tree (frame, text, shape, instance, ...).

    Children are owned by their parent and kept in document order.
    """

    id: str
    name: str = ""
    type: str = "FRAME"
    children: tuple["DesignNode", ...] = ()
    fills: tuple[Paint, ...] = ()
    strokes: tuple[Paint, ...] = ()
    effects: tuple[Effect, ...] = ()
    style: TypeStyle | None = None
    bounding_box: BoundingBox | None = None
    layout_mode: str | None = None
    item_spacing: float | None = None
    padding_top: float | None = None
    padding_right: float | None = None
    padding_bottom: float | None = None
    padding_left: float | None = None
    corner_radius: float | None = None

    def solid_fill_color(self) -> str | None:
        """Return the first visible SOLID fill as a CSS color literal."""
        return _first_solid_color(self.fills)

    def solid_stroke_color(self) -> str | None:
        """Return the first visible SOLID stroke as a CSS color literal."""
        return _first_solid_color(self.strokes)

    def first_shadow(self) -> Effect | None:
        for effect in self.effects:
            if effect.visible and effect.is_shadow:
                return effect
        return None

    def paddings(self) -> tuple[float, float, float, float] | None:
        """Auto-layout padding as (top, right, bottom, left), if fully defined."""
        values = (
            self.padding_top,
            self.padding_right,
            self.padding_bottom,
            self.padding_left,
        )
        if any(value is None for value in values):
            return None
        return values  # type: ignore[return-value]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        if self.fills:
            result["fills"] = [paint.to_dict() for paint in self.fills]
        if self.strokes:
            result["strokes"] = [paint.to_dict() for paint in self.strokes]
        if self.effects:
            result["effects"] = [effect.to_dict() for effect in self.effects]
        if self.style is not None:
            result["style"] = self.style.to_dict()
        if self.bounding_box is not None:
            result["absoluteBoundingBox"] = self.bounding_box.to_dict()
        for key, value in (
            ("layoutMode", self.layout_mode),
            ("itemSpacing", self.item_spacing),
            ("paddingTop", self.padding_top),
            ("paddingRight", self.padding_right),
            ("paddingBottom", self.padding_bottom),
            ("paddingLeft", self.padding_left),
            ("cornerRadius", self.corner_radius),
        ):
            if value is not None:
                result[key] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "document") -> "DesignNode":
        """Create a node (and its subtree) from the design file JSON.

        Raises:
            DesignTreeError: If the data is not a node object, lacks an id,
                or has malformed children or attribute lists.
        """
        if not isinstance(data, dict):
            raise DesignTreeError(
                f"Expected a node object, got {type(data).__name__}", node_path=path
            )
        node_id = data.get("id")
        if node_id is None or node_id == "":
            raise DesignTreeError("Design node is missing an id", node_path=path)

        raw_children = data.get("children") or []
        if not isinstance(raw_children, list):
            raise DesignTreeError("Node children must be a list", node_path=path)

        try:
            box = data.get("absoluteBoundingBox")
            style = data.get("style")
            node = cls(
                id=str(node_id),
                name=str(data.get("name") or ""),
                type=str(data.get("type") or "FRAME"),
                children=tuple(
                    cls.from_dict(child, f"{path}/{index}")
                    for index, child in enumerate(raw_children)
                ),
                fills=tuple(Paint.from_dict(p) for p in _list_of(data, "fills", path)),
                strokes=tuple(
                    Paint.from_dict(p) for p in _list_of(data, "strokes", path)
                ),
                effects=tuple(
                    Effect.from_dict(e) for e in _list_of(data, "effects", path)
                ),
                style=TypeStyle.from_dict(style) if isinstance(style, dict) else None,
                bounding_box=(
                    BoundingBox.from_dict(box) if isinstance(box, dict) else None
                ),
                layout_mode=data.get("layoutMode"),
                item_spacing=_optional_float(data.get("itemSpacing")),
                padding_top=_optional_float(data.get("paddingTop")),
                padding_right=_optional_float(data.get("paddingRight")),
                padding_bottom=_optional_float(data.get("paddingBottom")),
                padding_left=_optional_float(data.get("paddingLeft")),
                corner_radius=_optional_float(data.get("cornerRadius")),
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise DesignTreeError(
                f"Invalid attribute on node {node_id}: {e}", node_path=path
            ) from e
        return node


def _first_solid_color(paints: tuple[Paint, ...]) -> str | None:
    for paint in paints:
        if paint.visible and paint.type == "SOLID" and paint.color is not None:
            return paint.color.to_css(paint.opacity)
    return None


def _finite(value: Any) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"expected a finite number, got {value!r}")
    return number


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return _finite(value)


def _list_of(data: dict[str, Any], key: str, path: str) -> list[dict[str, Any]]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise DesignTreeError(f"Node {key} must be a list of objects", node_path=path)
    return value


def load_design_tree(data: dict[str, Any] | None) -> DesignNode | None:
    """Build a design tree from a file response or a bare node object.

    Accepts ``{"document": {...}}`` (full file response), ``{"nodes":
    {id: {"document": {...}}}}`` (a single-node response) or a node object.
    ``None`` or an empty mapping yields an empty tree.
    """
    if not data:
        return None
    if not isinstance(data, dict):
        raise DesignTreeError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    if "document" in data:
        return DesignNode.from_dict(data["document"])
    if "nodes" in data and "id" not in data:
        nodes = data["nodes"]
        if not isinstance(nodes, dict) or len(nodes) != 1:
            raise DesignTreeError("Expected exactly one entry under 'nodes'")
        (entry,) = nodes.values()
        if not isinstance(entry, dict) or "document" not in entry:
            raise DesignTreeError("Node entry is missing its 'document'")
        return DesignNode.from_dict(entry["document"])
    return DesignNode.from_dict(data)


def iter_nodes(tree: DesignNode | None) -> Iterator[DesignNode]:
    """Yield every node of the tree, depth-first pre-order."""
    if tree is None:
        return
    stack = [tree]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def count_nodes(tree: DesignNode | None) -> int:
    """Number of nodes in the tree (0 for an empty tree)."""
    return sum(1 for _ in iter_nodes(tree))
