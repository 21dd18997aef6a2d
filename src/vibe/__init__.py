"""vibe: contexto de código + fan-out a varios LLMs hospedados."""

__all__ = ["__version__"]

__version__ = "0.2.0"
