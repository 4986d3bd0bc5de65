"""
Shared fixtures for the CSS enhancer test suite.

Provides test fixtures for:
- Sample stylesheets and design documents
- Design trees built from raw JSON
- Logging state isolation
"""

import json
import logging
from pathlib import Path

import pytest

from css_enhancer.design import DesignNode, load_design_tree
from css_enhancer.enhancer_logging import LOGGER_NAME

SAMPLE_CSS = """/* Landing page */
.header {
  color: rgb(255, 0, 0);
  font-size: 18px;
}

.btn-primary {
  background-color: #0066ff;
  padding: 8px 16px;
}

#hero-title {
  font-size: 32px;
  font-weight: bold;
}

div {
  margin: 0;
}
"""


def solid_paint(r: float, g: float, b: float, a: float = 1.0) -> dict:
    return {"type": "SOLID", "color": {"r": r, "g": g, "b": b, "a": a}}


SAMPLE_DESIGN = {
    "document": {
        "id": "0:0",
        "name": "Page",
        "type": "CANVAS",
        "children": [
            {
                "id": "1:1",
                "name": "Header",
                "type": "FRAME",
                "fills": [solid_paint(1, 0, 0)],
                "absoluteBoundingBox": {"x": 0, "y": 0, "width": 1200, "height": 80},
                "children": [
                    {
                        "id": "1:2",
                        "name": "Hero Title",
                        "type": "TEXT",
                        "style": {
                            "fontFamily": "Inter",
                            "fontWeight": 700,
                            "fontSize": 32,
                            "lineHeightPx": 40,
                        },
                    }
                ],
            },
            {
                "id": "2:1",
                "name": "Primary Button",
                "type": "INSTANCE",
                "fills": [solid_paint(0, 0.4, 1)],
                "layoutMode": "HORIZONTAL",
                "itemSpacing": 8,
                "paddingTop": 8,
                "paddingRight": 16,
                "paddingBottom": 8,
                "paddingLeft": 16,
                "cornerRadius": 4,
            },
            {"id": "3:1", "name": "Footer", "type": "FRAME"},
        ],
    }
}


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Restore the package logger after tests that call setup_logging."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def sample_css() -> str:
    return SAMPLE_CSS


@pytest.fixture()
def sample_design() -> dict:
    return json.loads(json.dumps(SAMPLE_DESIGN))


@pytest.fixture()
def design_tree(sample_design) -> DesignNode:
    return load_design_tree(sample_design)


@pytest.fixture()
def header_node() -> DesignNode:
    """A single red FRAME named Header, with no children."""
    return DesignNode.from_dict(
        {"id": "1:1", "name": "Header", "type": "FRAME", "fills": [solid_paint(1, 0, 0)]}
    )


@pytest.fixture()
def project_files(tmp_path: Path, sample_css: str, sample_design: dict) -> Path:
    """A temporary project with a stylesheet and a design file."""
    (tmp_path / "styles.css").write_text(sample_css)
    (tmp_path / "design.json").write_text(json.dumps(sample_design))
    return tmp_path
