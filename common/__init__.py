"""Utilidades compartidas: configuración, base de datos y logging."""
