"""
Loading of JSON-encoded IR documents.

The front-end hands over IR aggregates as JSON, with every node encoded as an
object tagged by its class name:

    {"kind": "Contract", "name": "Token", "fields": [
        {"kind": "ContractField", "name": "totalSupply",
         "field_type": {"kind": "Uint", "size": 256}, "public": true}
    ]}

Operations are given by name ("ADD_ASSIGN"), import sets as plain lists.
"""

import json
from dataclasses import fields, is_dataclass
from typing import Any, Dict, Union

from ..exceptions import IRLoadError
from . import nodes
from .nodes import IRNode, Operation, Contract, Library, Interface


Aggregate = Union[Contract, Library, Interface]

NODE_KINDS: Dict[str, type] = {
    name: obj
    for name, obj in vars(nodes).items()
    if isinstance(obj, type) and is_dataclass(obj) and issubclass(obj, IRNode)
}

AGGREGATE_KINDS = ('Contract', 'Library', 'Interface')


def load_aggregate(document: Dict[str, Any]) -> Aggregate:
    """Build a Contract, Library or Interface from a decoded JSON document."""
    if not isinstance(document, dict) or document.get('kind') not in AGGREGATE_KINDS:
        raise IRLoadError(
            f'Top-level node must be one of {", ".join(AGGREGATE_KINDS)}'
        )
    return _build(document, document.get('kind'))


def load_aggregate_file(filepath: str) -> Aggregate:
    """Read and build an IR aggregate from a JSON file."""
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise IRLoadError(f'{filepath}: invalid JSON: {e}') from e
    except UnicodeDecodeError as e:
        raise IRLoadError(f'{filepath}: not UTF-8: {e}') from e
    except OSError as e:
        raise IRLoadError(f'{filepath}: cannot read: {e}') from e
    return load_aggregate(document)


def _build(value: Any, path: str) -> Any:
    if isinstance(value, list):
        return [_build(item, f'{path}[{i}]') for i, item in enumerate(value)]
    if not isinstance(value, dict):
        return value

    kind = value.get('kind')
    node_class = NODE_KINDS.get(kind)
    if node_class is None:
        raise IRLoadError(f'{path}: unknown node kind {kind!r}')

    known_fields = {f.name for f in fields(node_class)}
    kwargs = {}
    for key, raw in value.items():
        if key == 'kind':
            continue
        if key not in known_fields:
            raise IRLoadError(f'{path}: {kind} has no field {key!r}')
        if key == 'operation':
            kwargs[key] = _operation(raw, path)
        elif key == 'imports':
            kwargs[key] = set(raw)
        else:
            kwargs[key] = _build(raw, f'{path}.{key}')

    try:
        return node_class(**kwargs)
    except TypeError as e:
        raise IRLoadError(f'{path}: {e}') from e


def _operation(raw: Any, path: str) -> Operation:
    try:
        return Operation[raw]
    except KeyError:
        raise IRLoadError(f'{path}: unknown operation {raw!r}') from None
