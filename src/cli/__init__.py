"""Capa CLI (Typer + Rich): solo presentación y cableado de dependencias."""
