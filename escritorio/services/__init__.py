"""
Stores e serviços usados pelas rotas
"""
from .processos import ProcessoStore
from .configuracoes import ConfiguracoesStore
from .gestao import GestaoService

__all__ = [
    "ProcessoStore",
    "ConfiguracoesStore",
    "GestaoService",
]
