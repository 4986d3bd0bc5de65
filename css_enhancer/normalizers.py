"""Value normalizers for comparing stylesheet values with design values.

Colors are canonicalized to ``rgb(r, g, b)`` / ``rgba(r, g, b, a)``
literals so hex and functional notations compare equal. Lengths are
converted to pixels. No color-space conversion is attempted: ``hsl()``
and named colors stay as lowercase literals.
"""

import math
import re

HEX_COLOR_RE = re.compile(
    r"#(?:[0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{4}|[0-9a-fA-F]{3})\b"
)
RGB_FUNCTION_RE = re.compile(r"rgba?\s*\([^)]*\)", re.IGNORECASE)
HSL_FUNCTION_RE = re.compile(r"hsla?\s*\([^)]*\)", re.IGNORECASE)
LENGTH_RE = re.compile(r"^(-?\d*\.?\d+)\s*(px|rem|em)?$")

# Single-word values that are valid for color properties but are not colors
NON_COLOR_KEYWORDS = frozenset(
    [
        "inherit",
        "initial",
        "unset",
        "revert",
        "none",
        "auto",
        "currentcolor",
        "transparent",
    ]
)

FONT_WEIGHT_KEYWORDS = {"normal": 400, "bold": 700}


def format_color(r: int, g: int, b: int, a: float = 1.0) -> str:
    """Render channels as the canonical comparable color literal."""
    alpha = round(a, 2)
    if alpha >= 1:
        return f"rgb({r}, {g}, {b})"
    return f"rgba({r}, {g}, {b}, {alpha:g})"


def normalize_color(value: str) -> str | None:
    """Normalize a single color value.

    Supports: #RGB, #RGBA, #RRGGBB, #RRGGBBAA, rgb(), rgba(). hsl() and
    named colors are returned lowercased with whitespace collapsed.

    Returns:
        The canonical literal, or None if the value is not a color.
    """
    value = value.strip().lower()
    if not value:
        return None

    if value.startswith("#"):
        digits = value[1:]
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) not in (6, 8) or not re.fullmatch(r"[0-9a-f]+", digits):
            return None
        r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
        a = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
        return format_color(r, g, b, a)

    rgb_match = re.fullmatch(
        r"rgba?\s*\(\s*(\d+)\s*[,\s]\s*(\d+)\s*[,\s]\s*(\d+)\s*(?:[,/]\s*([\d.]+%?))?\s*\)",
        value,
    )
    if rgb_match:
        r, g, b = (min(int(rgb_match.group(i)), 255) for i in (1, 2, 3))
        alpha = rgb_match.group(4)
        a = 1.0
        if alpha:
            try:
                a = float(alpha[:-1]) / 100 if alpha.endswith("%") else float(alpha)
            except ValueError:
                return None
        return format_color(r, g, b, a)

    if HSL_FUNCTION_RE.fullmatch(value):
        return re.sub(r"\s+", " ", value)

    if re.fullmatch(r"[a-z]+", value) and value not in NON_COLOR_KEYWORDS:
        return value

    return None


def extract_css_color(value: str) -> str | None:
    """Find the first color literal in a declaration value and normalize it.

    Shorthands such as ``border: 1px solid #333`` yield the embedded color.
    A bare keyword is only treated as a named color when it is the whole
    value, so ``url(...)`` or ``1px solid red`` backgrounds never match
    on arbitrary words.
    """
    for pattern in (HEX_COLOR_RE, RGB_FUNCTION_RE, HSL_FUNCTION_RE):
        match = pattern.search(value)
        if match:
            return normalize_color(match.group(0))
    return normalize_color(value) if re.fullmatch(r"\s*[a-zA-Z]+\s*", value) else None


def find_css_colors(value: str) -> list[str]:
    """Every color literal in a declaration value, normalized, in order.

    Literals that fail to normalize are skipped. As with
    extract_css_color, a bare keyword only counts when it is the whole
    value.
    """
    matches = sorted(
        (match.start(), match.group(0))
        for pattern in (HEX_COLOR_RE, RGB_FUNCTION_RE, HSL_FUNCTION_RE)
        for match in pattern.finditer(value)
    )
    if not matches:
        color = extract_css_color(value)
        return [color] if color else []
    colors = (normalize_color(literal) for _, literal in matches)
    return [color for color in colors if color is not None]


def is_rgb_form(color: str) -> bool:
    """Whether a normalized color is in functional rgb()/rgba() form."""
    return color.startswith("rgb")


def parse_length(value: str, base_font_size: float = 16.0) -> float | None:
    """Convert a CSS length to pixels.

    Supports px, rem and em (relative to base_font_size) and unitless
    numbers. Percentages, viewport units and keywords return None.
    """
    match = LENGTH_RE.match(value.strip().lower())
    if not match:
        return None
    pixels = float(match.group(1))
    if match.group(2) in ("rem", "em"):
        pixels *= base_font_size
    return pixels if math.isfinite(pixels) else None


def format_px(value: float) -> str:
    """Format a pixel value, dropping a trailing .0."""
    if value == int(value):
        return f"{int(value)}px"
    return f"{round(value, 2)}px"


def normalize_font_family(value: str) -> str:
    """Primary family of a font stack, unquoted and lowercased."""
    primary = value.split(",")[0]
    return primary.strip().strip("'\"").strip().lower()


def normalize_font_weight(value: str) -> int | None:
    """Numeric weight for a font-weight value, or None if unknown."""
    value = value.strip().lower()
    if value in FONT_WEIGHT_KEYWORDS:
        return FONT_WEIGHT_KEYWORDS[value]
    try:
        weight = float(value)
    except ValueError:
        return None
    return int(weight) if math.isfinite(weight) else None
