"""WordPlay - autonomous tool-calling agent for a writing assistant."""

__version__ = "0.1.0"
