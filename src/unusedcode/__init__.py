"""Find unused Swift declarations by counting identifier occurrences."""

__version__ = "0.1.0"
