"""Adaptadores de I/O: HTTP, proveedores LLM, portapapeles."""
