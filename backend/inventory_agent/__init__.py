"""Furniture inventory agent: LangGraph loop over an Ollama model and MongoDB."""

__version__ = "1.0.0"
