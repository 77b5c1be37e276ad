"""Epic Tech Chat — conversational front end with pluggable responders."""

__version__ = "1.0.0"
