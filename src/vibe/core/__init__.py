"""Core: dominio, contratos y servicios (sin CLI ni detalles de UI)."""
