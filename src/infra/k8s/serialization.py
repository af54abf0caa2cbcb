"""YAML serialization for manifest documents.

Manifests are built as nested dicts and serialized once, here. Keys keep
insertion order so the same document always produces the same bytes.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import yaml  # type: ignore[import-untyped]


def dump_manifest(document: dict[str, Any]) -> str:
    """Serialize a single manifest document to block-style YAML."""
    return yaml.safe_dump(
        document,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def dump_manifests(documents: Iterable[dict[str, Any]]) -> str:
    """Serialize several manifests into one multi-document YAML stream."""
    return yaml.safe_dump_all(
        list(documents),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        explicit_start=True,
    )

