"""Core detection, parsing, and intermediate representation modules.

WHY: The core package holds the pure, network-free heart of the inserter —
the data model, the typed error taxonomy, the video reference detector,
the entity decoder, and the caption XML parser. Everything here is
deterministic and testable without mocks.

HOW: ir.py defines the data structures, errors.py the failure reasons,
detector.py finds video references in note text, entities.py decodes
character references, captions.py turns caption XML into entries.

RULES:
- No network I/O in this package (that lives in api/)
- IR dataclasses are the contract between retrieval and formatting
"""
