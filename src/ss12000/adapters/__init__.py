"""Adaptadores de I/O: transporte httpx, fachada de recursos, exportación."""
