"""Hong Kong International Airport flight archive and history indexes."""

__version__ = "0.1.0"
