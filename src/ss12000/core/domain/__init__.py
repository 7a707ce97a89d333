"""Modelos y tabla de recursos del dominio.

Por qué:
- Aquí viven las estructuras de datos puras (Pydantic v2 / dataclasses).
- El dominio no conoce HTTP ni la CLI: solo la superficie de la API SS12000.
"""
