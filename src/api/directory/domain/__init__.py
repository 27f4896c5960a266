"""Directory domain layer: records, validation rules and the view pipeline.

Everything here is pure: no I/O, no framework imports.
"""
