"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan los adaptadores concretos.
- Invierte dependencias: el Core depende de abstracciones, nunca de un
  registrador o proveedor de IA concreto.
"""

from core.interfaces.registrar import RegistrarAdapter
from core.interfaces.suggester import SuggestionProvider

__all__ = ["RegistrarAdapter", "SuggestionProvider"]
