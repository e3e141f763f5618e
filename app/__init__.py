"""CI entry points."""
