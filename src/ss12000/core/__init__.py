"""Core: configuración, errores, query y tabla de recursos.

Por qué:
- Nada aquí habla HTTP; los adaptadores dependen del core, no al revés.
"""
