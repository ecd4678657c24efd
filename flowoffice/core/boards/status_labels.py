"""Status-label decoding for status columns.

FlowOffice stores a status column's labels in ``columnJSON`` as a superjson
document: the plain JSON value under ``json`` plus type annotations under
``meta.values`` for anything JSON cannot carry natively (dates, undefined,
bigints, sets, maps, ...). Annotations are applied here before the label
list is validated.
"""

from __future__ import annotations

import json
import math
from datetime import datetime
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError

from flowoffice.common.exceptions import MalformedColumnConfig
from flowoffice.transport.schemas import Column, StatusLabel

_labels_adapter = TypeAdapter(list[StatusLabel])

_SPECIAL_NUMBERS = {"NaN": math.nan, "Infinity": math.inf, "-Infinity": -math.inf}


def _parse_path(key: str) -> list[str]:
    # Keys are dot-separated paths; "\." escapes a literal dot
    segments: list[str] = []
    current = ""
    i = 0
    while i < len(key):
        char = key[i]
        if char == "\\" and key[i + 1 : i + 2] == ".":
            current += "."
            i += 2
            continue
        if char == ".":
            segments.append(current)
            current = ""
        else:
            current += char
        i += 1
    segments.append(current)
    return segments


def _untransform(value: Any, annotation: Any) -> Any:
    if isinstance(annotation, list):
        # ["class", name], ["custom", name], ["symbol", name], ...
        return value

    if annotation == "undefined":
        return None
    if annotation == "Date":
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if annotation == "bigint":
        return int(value)
    if annotation == "number":
        return _SPECIAL_NUMBERS[value]
    if annotation == "set":
        return list(value)
    if annotation == "map":
        return {(tuple(k) if isinstance(k, list) else k): v for k, v in value}
    if annotation == "regexp":
        return str(value)
    if annotation == "Error":
        return dict(value)
    raise ValueError(f"unknown superjson annotation {annotation!r}")


def _get_at(target: Any, path: list[str]) -> Any:
    for segment in path:
        target = target[int(segment)] if isinstance(target, list) else target[segment]
    return target


def _set_at(root: Any, path: list[str], transform: Callable[[Any], Any]) -> Any:
    if not path:
        return transform(root)
    parent = _get_at(root, path[:-1])
    last = path[-1]
    if isinstance(parent, list):
        parent[int(last)] = transform(parent[int(last)])
    else:
        parent[last] = transform(parent[last])
    return root


def _walk_annotations(tree: Any, origin: list[str], found: list[tuple[list[str], Any]]) -> None:
    if tree is None:
        return
    if isinstance(tree, str):
        found.append((origin, tree))
        return
    if isinstance(tree, list):
        # leaf: [annotation]; inner node: [annotation, {child_path: subtree}]
        annotation, children = tree[0], (tree[1] if len(tree) > 1 else None)
        if children:
            _walk_annotations(children, origin, found)
        found.append((origin, annotation))
        return
    for key, subtree in tree.items():
        _walk_annotations(subtree, origin + _parse_path(key), found)


def parse_superjson(text: str) -> Any:
    document = json.loads(text)
    if not isinstance(document, dict) or "json" not in document:
        return document

    value = document["json"]
    meta = document.get("meta") or {}
    annotations: list[tuple[list[str], Any]] = []
    _walk_annotations(meta.get("values"), [], annotations)

    # children before parents, so container conversions see converted items
    for path, annotation in annotations:
        value = _set_at(value, path, lambda v, a=annotation: _untransform(v, a))
    return value


def decode_status_labels(column: Column) -> list[StatusLabel]:
    """Decode a status column's label definitions.

    Raises ``MalformedColumnConfig`` when the payload cannot be decoded or
    does not describe a label list; an empty list is only returned when the
    column really defines no labels.
    """
    try:
        payload = parse_superjson(column.column_config or "")
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise MalformedColumnConfig(column.column_key, str(e) or type(e).__name__) from e

    try:
        return _labels_adapter.validate_python(payload)
    except ValidationError as e:
        raise MalformedColumnConfig(column.column_key, f"{e.error_count()} validation errors") from e


def encode_status_labels(labels: list[StatusLabel]) -> str:
    """Serialize labels the way FlowOffice stores them (no annotations needed)."""
    return json.dumps(
        {"json": [label.model_dump(by_alias=True) for label in labels]},
        separators=(",", ":"),
    )

