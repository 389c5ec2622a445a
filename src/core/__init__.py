"""Core: dominio, contratos y motor de consultas (sin I/O concreto)."""
