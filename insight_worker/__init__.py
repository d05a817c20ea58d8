"""Journal insight worker: resilient AI insights for journal entries."""

__version__ = "0.1.0"
