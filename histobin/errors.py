from __future__ import annotations


class InvalidInputError(ValueError):
    """
    Raised for malformed input: empty or non-finite samples, bad bin specs,
    non-positive bin counts/widths, bad config values.
    """
