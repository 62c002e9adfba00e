"""Codec builders — one module per descriptor shape.

Every builder returns a ``Codec`` whose ``parse`` is a lazy generator
of ``(value, remaining_segments)`` candidates.
"""
