"""Adaptadores de I/O: HTTP, estado en URL, scroll, favoritos y exportación."""
