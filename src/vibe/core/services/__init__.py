"""Servicios del Core (orquestación reutilizable fuera de la CLI)."""
