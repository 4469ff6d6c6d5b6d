"""SCIP-shaped JSON output.

Builds the dictionary form of a SCIP ``Index`` (metadata, documents, external
symbols) from emitted Documents. Field names follow the SCIP protobuf schema,
so the JSON can be converted with ``scip convert`` style tooling.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from symdex.config.constants import TOOL_NAME, TOOL_VERSION
from symdex.index.models import Document, SymbolInformation

PROTOCOL_VERSION = 0
TEXT_ENCODING = "UTF8"


def index_to_dict(
    documents: Sequence[Document],
    *,
    project_root: Path,
    external_symbols: Sequence[SymbolInformation] = (),
    arguments: Sequence[str] = (),
) -> dict[str, Any]:
    """Assemble the SCIP index dictionary for a run."""
    return {
        "metadata": {
            "version": PROTOCOL_VERSION,
            "tool_info": {
                "name": TOOL_NAME,
                "version": TOOL_VERSION,
                "arguments": list(arguments),
            },
            "project_root": project_root.resolve().as_uri(),
            "text_document_encoding": TEXT_ENCODING,
        },
        "documents": [doc.to_dict() for doc in documents],
        "external_symbols": [info.to_dict() for info in external_symbols],
    }


def write_index_json(path: Path, index: dict[str, Any]) -> int:
    """Write the index dictionary as JSON. Returns bytes written."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(index, indent=2, ensure_ascii=False) + "\n"
    data = payload.encode("utf-8")
    path.write_bytes(data)
    return len(data)
