"""Design-token inventory of a parsed stylesheet.

Collects the custom properties, colors, fonts, spacing lengths, radii,
shadows and motion declarations a stylesheet uses, and tags selectors
that name design components or layers.
"""

import re

from .models import StyleRule, StylesheetSummary
from .normalizers import find_css_colors

COLOR_PROPERTY_RE = re.compile(
    r"color|background|border|shadow|fill|stroke", re.IGNORECASE
)
SPACING_PROPERTIES = ("margin", "padding", "gap", "top", "right", "bottom", "left")
SPACING_VALUE_RE = re.compile(r"\d+(?:\.\d+)?(?:px|rem|em|%)")
MOTION_PROPERTIES = ("animation", "transition")

COMPONENT_SELECTOR_RE = re.compile(
    r"\.(?:component|figma|layer|frame|group)", re.IGNORECASE
)
LAYER_SELECTOR_RE = re.compile(r"\.((?:layer|component|frame)-\w+)", re.IGNORECASE)


def is_component_selector(selector: str) -> bool:
    """Whether a selector has a component, figma, layer, frame or group class."""
    return COMPONENT_SELECTOR_RE.search(selector) is not None


def layer_name(selector: str) -> str | None:
    """The first ``layer-*``, ``component-*`` or ``frame-*`` class of a selector."""
    match = LAYER_SELECTOR_RE.search(selector)
    return match.group(1) if match else None


def summarize_rules(rules: list[StyleRule]) -> StylesheetSummary:
    """Build the token inventory of a list of rules, in source order.

    A custom property declared twice keeps its last value.
    """
    summary = StylesheetSummary()
    colors: dict[str, None] = {}
    fonts: dict[str, None] = {}
    spacing: dict[str, None] = {}
    radii: dict[str, None] = {}
    shadows: dict[str, None] = {}
    animations: dict[str, None] = {}

    for rule in rules:
        if is_component_selector(rule.selector):
            summary.components.append(rule.selector)
        layer = layer_name(rule.selector)
        if layer:
            summary.layers[rule.selector] = layer

        for declaration in rule.declarations:
            prop, value = declaration.property, declaration.value
            if prop.startswith("--"):
                summary.variables[prop[2:]] = value
                continue
            if COLOR_PROPERTY_RE.search(prop):
                colors.update(dict.fromkeys(find_css_colors(value)))
            if any(name in prop for name in SPACING_PROPERTIES):
                spacing.update(dict.fromkeys(SPACING_VALUE_RE.findall(value)))
            if any(name in prop for name in MOTION_PROPERTIES):
                animations[f"{prop}: {value}"] = None

        font_family = rule.get("font-family")
        if font_family:
            fonts[font_family.replace("'", "").replace('"', "")] = None
        radius = rule.get("border-radius")
        if radius:
            radii[radius] = None
        shadow = rule.get("box-shadow")
        if shadow:
            shadows[shadow] = None

    summary.colors = list(colors)
    summary.fonts = list(fonts)
    summary.spacing = list(spacing)
    summary.border_radii = list(radii)
    summary.shadows = list(shadows)
    summary.animations = list(animations)
    return summary
