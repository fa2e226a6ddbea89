"""
JSON-LD extraction.

Every ``<script type="application/ld+json">`` block is parsed independently.
A block that is not valid JSON is skipped and recorded; it never fails the
analysis.
"""

import json
from typing import Any, List

from app.features.seo.schemas.seo import StructuredDataError, StructuredDataSet
from app.features.seo.services.markup import HtmlDocument
from app.platform.logger import get_logger

logger = get_logger("structured_data")

JSON_LD_SELECTOR = 'script[type="application/ld+json"]'


def _type_values(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []


def _collect_types(block: Any) -> List[str]:
    """@type of a block, or of its @graph entries when it has no top-level @type."""
    if isinstance(block, list):
        types = []
        for entry in block:
            types.extend(_collect_types(entry))
        return types

    if not isinstance(block, dict):
        return []

    if "@type" in block:
        return _type_values(block["@type"])

    types = []
    graph = block.get("@graph")
    if isinstance(graph, list):
        for entry in graph:
            if isinstance(entry, dict):
                types.extend(_type_values(entry.get("@type")))
    return types


def extract_structured_data(doc: HtmlDocument) -> StructuredDataSet:
    items: List[Any] = []
    errors: List[StructuredDataError] = []
    types: List[str] = []

    for index, node in enumerate(doc.query(JSON_LD_SELECTOR)):
        raw = node.raw_text().strip()
        try:
            block = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Skipping malformed JSON-LD block #{index}: {e}")
            errors.append(StructuredDataError(index=index, error=str(e)))
            continue

        items.append(block)
        for type_name in _collect_types(block):
            if type_name not in types:
                types.append(type_name)

    return StructuredDataSet(items=items, types=types, errors=errors)
