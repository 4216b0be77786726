"""Static analysis subpackage for migration-check.

Submodules are imported directly; the ingest adapters depend on
`type_fingerprints`, so this package stays free of eager imports.
"""
