"""
Serialization helpers for progress snapshots.

A snapshot is the only persisted unit of a playthrough:

    {"currentPage": "<page name>", "vars": {"<name>": <int>, ...}}

Provides JSON/YAML round-trip via an intermediate dict representation.
Documents themselves are never serialized; they are re-loaded from markup.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from questmark.interpreter import ProgressError
from questmark.model import Progress, canonical_name


def progress_to_dict(p: Progress) -> Dict[str, Any]:
    return {
        "currentPage": p.current_page,
        "vars": {name: value for name, value in p.vars.items() if value},
    }


def progress_from_dict(d: Any) -> Progress:
    if not isinstance(d, dict):
        raise ProgressError(f"State loading error: expected a mapping, got {type(d).__name__}")
    page = d.get("currentPage", d.get("current_page"))
    variables = d.get("vars")
    if not isinstance(page, str):
        raise ProgressError("State loading error: missing current page")
    if not isinstance(variables, dict):
        raise ProgressError("State loading error: missing variable mapping")

    p = Progress(current_page=canonical_name(page))
    for name, value in variables.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ProgressError(f'State loading error: variable "{name}" is not an integer')
        if value:
            p.vars[canonical_name(name)] = value
    return p


def progress_to_json(p: Progress) -> str:
    return json.dumps(progress_to_dict(p), sort_keys=True)


def progress_from_json(s: str) -> Progress:
    try:
        d = json.loads(s)
    except ValueError as e:
        raise ProgressError(f"State loading error: {e}") from e
    return progress_from_dict(d)


def progress_to_yaml(p: Progress) -> str:
    return yaml.safe_dump(progress_to_dict(p))


def progress_from_yaml(s: str) -> Progress:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise ProgressError(f"State loading error: {e}") from e
    return progress_from_dict(d)
