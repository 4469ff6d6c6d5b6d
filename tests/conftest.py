"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import json
import logging
import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local symdex package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of symdex modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("symdex"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Undo configure_logging() calls so level filters do not leak between tests."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if type(handler).__module__.startswith("_pytest"):
            continue
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.WARNING)


def _node(
    node_id: int,
    kind: str,
    span: list[int],
    parent: int | None = None,
    *,
    name: int | None = None,
    text: str | None = None,
) -> dict[str, Any]:
    return {"id": node_id, "kind": kind, "range": span, "parent": parent, "name": name, "text": text}


@pytest.fixture
def sample_dump() -> dict[str, Any]:
    """Semantic dump of one file::

    const a = 1
    const b = { a }
    """
    return {
        "version": 1,
        "files": [
            {
                "path": "src/a.ts",
                "package": {"name": "pkg", "version": "1.0.0"},
                "text": "const a = 1\nconst b = { a }\n",
                "nodes": [
                    _node(0, "source_file", [0, 0, 2, 0]),
                    _node(1, "variable_statement", [0, 0, 0, 11], 0),
                    _node(2, "variable_declaration_list", [0, 0, 0, 11], 1),
                    _node(3, "variable_declaration", [0, 6, 0, 11], 2, name=4),
                    _node(4, "identifier", [0, 6, 0, 7], 3, text="a"),
                    _node(5, "variable_statement", [1, 0, 1, 15], 0),
                    _node(6, "variable_declaration_list", [1, 0, 1, 15], 5),
                    _node(7, "variable_declaration", [1, 6, 1, 15], 6, name=8),
                    _node(8, "identifier", [1, 6, 1, 7], 7, text="b"),
                    _node(9, "object_literal_expression", [1, 10, 1, 15], 7),
                    _node(10, "shorthand_property_assignment", [1, 12, 1, 13], 9, name=11),
                    _node(11, "identifier", [1, 12, 1, 13], 10, text="a"),
                ],
            }
        ],
        "symbols": [
            {"id": 0, "declarations": [3], "documentation": ["The answer."]},
            {"id": 1, "declarations": [7]},
            {"id": 2, "declarations": [10]},
        ],
        "identifiers": {"4": 0, "8": 1, "11": 2},
        "signatures": {"4": "const a: 1"},
        "shorthand_values": {"10": 0},
    }


@pytest.fixture
def dump_file(tmp_path: Path, sample_dump: dict[str, Any]) -> Path:
    """The sample dump written to disk."""
    path = tmp_path / "dump.json"
    path.write_text(json.dumps(sample_dump))
    return path
