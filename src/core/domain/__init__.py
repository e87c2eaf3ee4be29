"""Modelos y entidades del dominio.

Por qué:
- Aquí viven estructuras de datos puras y estrictas (Pydantic v2).
- El dominio no sabe nada de HTTP, la CLI ni SDKs de registradores: solo de
  los conceptos del problema (dominios, cotizaciones, resultados, reportes).
"""
