"""Conflict detection between design values and stylesheet values.

For every accepted mapping, each declaration of each matched rule is
compared with the node's authoritative design value for the same
visual property. A conflict is only raised when the node actually has
that attribute and the normalized values differ.
"""

import math
from collections.abc import Callable

from .config import EnhancementOptions
from .design import DesignNode, iter_nodes
from .enhancer_logging import LogCategory, get_category_logger
from .models import (
    ConflictKind,
    ConflictSeverity,
    NodeStyleMapping,
    StyleConflict,
    StyleDeclaration,
    StyleRule,
)
from .normalizers import (
    extract_css_color,
    format_px,
    is_rgb_form,
    normalize_font_family,
    normalize_font_weight,
    parse_length,
)
from .scoring import is_color_property
from .timing import timed

logger = get_category_logger(LogCategory.CONFLICTS)

STROKE_COLOR_PREFIXES = ("border", "outline")
SIZE_PROPERTIES = ("width", "height")
GAP_PROPERTIES = ("gap", "row-gap", "column-gap")
PADDING_SIDES = {
    "padding-top": "padding_top",
    "padding-right": "padding_right",
    "padding-bottom": "padding_bottom",
    "padding-left": "padding_left",
}

# (kind, design value, css value, severity, suggestion), or None
Check = Callable[
    [DesignNode, StyleDeclaration],
    tuple[ConflictKind, str, str, ConflictSeverity, str] | None,
]


class ConflictDetector:
    """Detects StyleConflicts for accepted node mappings."""

    def __init__(self, options: EnhancementOptions | None = None):
        self.options = options or EnhancementOptions()

    @timed("detect_conflicts")
    def detect(
        self, mappings: list[NodeStyleMapping], tree: DesignNode | None
    ) -> list[StyleConflict]:
        """Detect conflicts for all mappings.

        Each mapping's ``conflicts`` list is replaced with its own
        conflicts; the returned list is the flat concatenation in
        mapping, rule, declaration order. Mappings built by NodeMapper
        carry their node; others are resolved by id, first match wins.
        """
        nodes: dict[str, DesignNode] = {}
        for node in iter_nodes(tree):
            nodes.setdefault(node.id, node)
        conflicts: list[StyleConflict] = []

        for mapping in mappings:
            node = mapping.node
            if node is None:
                node = nodes.get(mapping.node_id)
            if node is None:
                mapping.conflicts = []
                continue
            node_conflicts = [
                conflict
                for rule in mapping.matched_rules
                for declaration in rule.declarations
                if (conflict := self.check_declaration(node, rule, declaration))
            ]
            mapping.conflicts = node_conflicts
            conflicts.extend(node_conflicts)

        logger.debug(f"Detected {len(conflicts)} conflicts in {len(mappings)} mappings")
        return conflicts

    def check_declaration(
        self, node: DesignNode, rule: StyleRule, declaration: StyleDeclaration
    ) -> StyleConflict | None:
        """Compare one declaration with the node's design value."""
        check = self._check_for(declaration.property)
        if check is None:
            return None
        found = check(node, declaration)
        if found is None:
            return None

        kind, design_value, css_value, severity, suggestion = found
        return StyleConflict(
            kind=kind,
            property=declaration.property,
            design_value=design_value,
            css_value=css_value,
            severity=severity,
            suggestion=suggestion,
            node_id=node.id,
            selector=rule.selector,
        )

    def _check_for(self, prop: str) -> Check | None:
        if is_color_property(prop):
            return None if self.options.ignore_colors else self._color_conflict
        if prop in ("font-size", "font-weight", "font-family", "line-height"):
            return None if self.options.ignore_typography else self._typography_conflict
        if self.options.ignore_spacing:
            return None
        if prop in SIZE_PROPERTIES:
            return self._size_conflict
        if prop in GAP_PROPERTIES or prop in PADDING_SIDES or prop in (
            "padding",
            "border-radius",
        ):
            return self._layout_conflict
        if prop == "box-shadow":
            return self._effects_conflict
        return None

    def _color_conflict(self, node: DesignNode, declaration: StyleDeclaration):
        if declaration.property.startswith(STROKE_COLOR_PREFIXES):
            design_color = node.solid_stroke_color()
        else:
            design_color = node.solid_fill_color()
        css_color = extract_css_color(declaration.value)
        if design_color is None or css_color is None or design_color == css_color:
            return None

        if is_rgb_form(design_color) and is_rgb_form(css_color):
            severity = ConflictSeverity.MEDIUM
        else:
            severity = ConflictSeverity.LOW
        return (
            ConflictKind.COLOR,
            design_color,
            css_color,
            severity,
            f"Consider using design color: {design_color}",
        )

    def _typography_conflict(self, node: DesignNode, declaration: StyleDeclaration):
        style = node.style
        if style is None:
            return None
        prop, value = declaration.property, declaration.value

        design_value: str | None = None
        css_comparable: str | None = None
        if prop == "font-size" and style.font_size is not None:
            design_value = format_px(style.font_size)
            css_size = parse_length(value)
            css_comparable = format_px(css_size) if css_size is not None else None
        elif prop == "font-weight" and style.font_weight is not None:
            design_value = str(int(style.font_weight))
            css_weight = normalize_font_weight(value)
            css_comparable = str(css_weight) if css_weight is not None else None
        elif prop == "font-family" and style.font_family:
            design_value = style.font_family
            if normalize_font_family(value) == normalize_font_family(design_value):
                return None
            css_comparable = value
        elif prop == "line-height" and style.line_height_px is not None:
            design_value = format_px(style.line_height_px)
            css_comparable = self._line_height_px(value, style.font_size)

        if design_value is None or css_comparable is None:
            return None
        if css_comparable == design_value:
            return None
        return (
            ConflictKind.TYPOGRAPHY,
            design_value,
            value,
            ConflictSeverity.MEDIUM,
            f"Consider using design typography: {prop}: {design_value}",
        )

    @staticmethod
    def _line_height_px(value: str, font_size: float | None) -> str | None:
        value = value.strip().lower()
        try:
            multiplier = float(value)
        except ValueError:
            length = parse_length(value)
            return format_px(length) if length is not None else None
        if font_size is None:
            return None
        pixels = multiplier * font_size
        return format_px(pixels) if math.isfinite(pixels) else None

    def _size_conflict(self, node: DesignNode, declaration: StyleDeclaration):
        box = node.bounding_box
        if box is None:
            return None
        design = box.width if declaration.property == "width" else box.height
        return self._length_conflict(
            ConflictKind.SPACING, design, declaration, "size"
        )

    def _layout_conflict(self, node: DesignNode, declaration: StyleDeclaration):
        prop = declaration.property
        if prop in GAP_PROPERTIES:
            design = node.item_spacing
        elif prop in PADDING_SIDES:
            design = getattr(node, PADDING_SIDES[prop])
        elif prop == "border-radius":
            design = node.corner_radius
        else:
            return self._padding_shorthand_conflict(node, declaration)
        if design is None:
            return None
        return self._length_conflict(
            ConflictKind.LAYOUT, design, declaration, "layout value"
        )

    def _padding_shorthand_conflict(
        self, node: DesignNode, declaration: StyleDeclaration
    ):
        paddings = node.paddings()
        parts = [parse_length(part) for part in declaration.value.split()]
        if paddings is None or not 1 <= len(parts) <= 4 or None in parts:
            return None

        # CSS shorthand expansion: 1 -> all, 2 -> v h, 3 -> t h b, 4 -> t r b l
        if len(parts) == 1:
            parts = parts * 4
        elif len(parts) == 2:
            parts = [parts[0], parts[1], parts[0], parts[1]]
        elif len(parts) == 3:
            parts = [parts[0], parts[1], parts[2], parts[1]]

        design_value = " ".join(format_px(p) for p in paddings)
        css_comparable = " ".join(format_px(p) for p in parts)
        if design_value == css_comparable:
            return None
        return (
            ConflictKind.LAYOUT,
            design_value,
            declaration.value,
            ConflictSeverity.LOW,
            f"Consider using design layout value: padding: {design_value}",
        )

    @staticmethod
    def _length_conflict(
        kind: ConflictKind,
        design: float,
        declaration: StyleDeclaration,
        label: str,
    ):
        css_length = parse_length(declaration.value)
        if css_length is None:
            return None
        design_value = format_px(design)
        if format_px(css_length) == design_value:
            return None
        return (
            kind,
            design_value,
            declaration.value,
            ConflictSeverity.LOW,
            f"Consider using design {label}: {declaration.property}: {design_value}",
        )

    @staticmethod
    def _effects_conflict(node: DesignNode, declaration: StyleDeclaration):
        shadow = node.first_shadow()
        if shadow is None or declaration.value.strip().lower() != "none":
            return None
        design_value = shadow.to_css()
        return (
            ConflictKind.EFFECTS,
            design_value,
            declaration.value,
            ConflictSeverity.LOW,
            f"Design applies a shadow; consider box-shadow: {design_value}",
        )


def detect_conflicts(
    mappings: list[NodeStyleMapping],
    tree: DesignNode | None,
    options: EnhancementOptions | None = None,
) -> list[StyleConflict]:
    """Convenience function to detect conflicts for a set of mappings."""
    return ConflictDetector(options).detect(mappings, tree)
