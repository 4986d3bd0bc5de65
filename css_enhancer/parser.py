"""Best-effort stylesheet parser.

Scans raw stylesheet text for flat ``selector { declarations }`` blocks.
This is a deliberately restricted grammar: nesting, at-rules, media
queries and combinator semantics are not interpreted. Fragments that do
not fit the grammar are reported as warnings and skipped; the parser
never raises on malformed input.
"""

import re

from .enhancer_logging import LogCategory, get_category_logger
from .models import ParseResult, StyleDeclaration, StyleRule
from .summary import summarize_rules
from .timing import PerformanceTimer

logger = get_category_logger(LogCategory.PARSER)

COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")

# selector { declarations } with no nested braces
RULE_RE = re.compile(r"([^{}]+)\{([^{}]*)\}")

DECLARATION_RE = re.compile(
    r"""
    ^\s*
    (?P<property>-{0,2}[a-zA-Z][a-zA-Z0-9_-]*)   # property or --custom-property
    \s*:\s*
    (?P<value>.*?)                               # value, important flag stripped
    \s*(?P<important>!\s*important)?
    \s*$
    """,
    re.VERBOSE | re.IGNORECASE | re.DOTALL,
)

SNIPPET_LENGTH = 40


def calculate_specificity(selector: str) -> int:
    """Heuristic specificity score for a selector.

    100 per ``#``, 10 per ``.``, ``:`` or ``[``, and 1 per ASCII letter
    anywhere in the selector, letters inside class and id names included.
    This is not standard CSS specificity; the letter count is kept as-is so
    scores stay stable for existing consumers.
    """
    ids = selector.count("#")
    classes = len(re.findall(r"[.:\[]", selector))
    letters = len(re.findall(r"[a-zA-Z]", selector))
    return ids * 100 + classes * 10 + letters


class StylesheetParser:
    """Parses stylesheet text into ordered rules with diagnostics."""

    def parse(self, text: str | bytes | None) -> ParseResult:
        """Parse stylesheet text.

        Args:
            text: Raw stylesheet text (UTF-8 bytes are decoded).

        Returns:
            ParseResult with rules in source order. ``is_valid`` is only
            False if scanning failed internally.
        """
        result = ParseResult()

        with PerformanceTimer("parse_stylesheet", auto_log=False) as timer:
            try:
                if isinstance(text, bytes):
                    text = text.decode("utf-8", errors="replace")
                self._scan(self._remove_comments(text or ""), result)
                result.summary = summarize_rules(result.rules)
            except Exception as e:
                logger.exception("Critical stylesheet parsing error")
                result.errors.append(f"Critical parsing error: {e}")
                result.is_valid = False

        result.statistics.total_rules = len(result.rules)
        result.statistics.processing_time_ms = timer.duration_ms
        logger.debug(
            f"Parsed {len(result.rules)} rules, "
            f"{result.statistics.total_declarations} declarations, "
            f"{len(result.warnings)} warnings",
            extra={"rule_count": len(result.rules), "operation": "parse_stylesheet"},
        )
        return result

    def _remove_comments(self, content: str) -> str:
        """Remove block comments, keeping their newlines so lines stay accurate."""
        return COMMENT_RE.sub(lambda m: "\n" * m.group(0).count("\n"), content)

    def _scan(self, content: str, result: ParseResult) -> None:
        cursor = 0
        for match in RULE_RE.finditer(content):
            self._warn_unrecognized(content, cursor, match.start(), result)
            cursor = match.end()

            raw_selector = match.group(1)
            selector_start = match.start(1)

            # Text up to the last ';' belongs to an earlier, broken fragment
            if ";" in raw_selector:
                split_at = raw_selector.rindex(";") + 1
                self._warn_unrecognized(
                    content, selector_start, selector_start + split_at, result
                )
                selector_start += split_at
                raw_selector = raw_selector[split_at:]

            selector = raw_selector.strip()
            selector_start += len(raw_selector) - len(raw_selector.lstrip())
            line, column = _position(content, selector_start)
            body = match.group(2)

            if not selector or not body.strip():
                result.warnings.append(f"Empty rule at line {line}")
                continue

            if selector.startswith("@"):
                result.warnings.append(
                    f"Unsupported at-rule skipped at line {line}: {_snippet(selector)}"
                )
                continue

            declarations = self._parse_declarations(content, body, match.start(2))
            if not declarations:
                result.warnings.append(
                    f"Rule without valid declarations at line {line}: {_snippet(selector)}"
                )
                continue

            result.rules.append(
                StyleRule(
                    selector=selector,
                    declarations=tuple(declarations),
                    specificity=calculate_specificity(selector),
                    source_line=line,
                    source_column=column,
                )
            )
            result.statistics.total_declarations += len(declarations)
            result.statistics.total_selectors += len(
                [part for part in selector.split(",") if part.strip()]
            )

        self._warn_unrecognized(content, cursor, len(content), result)

    def _parse_declarations(
        self, content: str, body: str, body_start: int
    ) -> list[StyleDeclaration]:
        """Split a rule body into declarations.

        Pieces that are not ``property: value`` are dropped silently.
        """
        declarations = []
        for piece in re.finditer(r"[^;]+", body):
            match = DECLARATION_RE.match(piece.group(0))
            if not match or not match.group("value"):
                continue
            line, _ = _position(
                content, body_start + piece.start() + match.start("property")
            )
            prop = match.group("property")
            if not prop.startswith("--"):
                prop = prop.lower()
            declarations.append(
                StyleDeclaration(
                    property=prop,
                    value=match.group("value"),
                    important=match.group("important") is not None,
                    source_line=line,
                )
            )
        return declarations

    def _warn_unrecognized(
        self, content: str, start: int, end: int, result: ParseResult
    ) -> None:
        fragment = content[start:end]
        if not fragment.strip():
            return
        offset = start + len(fragment) - len(fragment.lstrip())
        line, _ = _position(content, offset)
        result.warnings.append(
            f"Unrecognized content at line {line}: {_snippet(fragment)}"
        )


def _position(content: str, offset: int) -> tuple[int, int]:
    """1-based (line, column) of an offset."""
    line = content.count("\n", 0, offset) + 1
    column = offset - (content.rfind("\n", 0, offset) + 1) + 1
    return line, column


def _snippet(text: str) -> str:
    text = " ".join(text.split())
    if len(text) > SNIPPET_LENGTH:
        return text[: SNIPPET_LENGTH - 3] + "..."
    return text


def parse_stylesheet(text: str | bytes | None) -> ParseResult:
    """Convenience function to parse stylesheet text."""
    return StylesheetParser().parse(text)
