"""
questmark: branching-narrative markup and runtime.

Authors write plain-text markup describing named pages, each with body
text, optional state-mutating logic and a list of choices linking to other
pages. This package turns that markup into an immutable Document and drives
a playthrough over it.

LAYERS:
-------
    expressions    - logic AST (structure only)
    model          - pages, choices, documents, progress
    markup_parser  - markup text -> Document
    validation     - referential integrity and reachability
    interpreter    - mutable playthrough state over a shared Document
    serialization  - progress snapshots as dict / JSON / YAML

Rendering, storage and file discovery belong to the host application.
"""

__version__ = "0.1.0"
