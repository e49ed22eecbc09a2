"""
Models do banco de dados
"""
from .processo import Processo
from .configuracao import Configuracao, CHAVE_CONFIGURACOES

__all__ = [
    "Processo",
    "Configuracao",
    "CHAVE_CONFIGURACOES",
]
