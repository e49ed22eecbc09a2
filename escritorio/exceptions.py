"""
Erros de domínio do controle de processos.

Cada erro carrega o tipo (usado na resposta HTTP) e se a operação pode ser
repetida pelo chamador.
"""
from enum import Enum
from typing import Optional


class ErrorType(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"
    PROCESSING_ERROR = "processing_error"
    DATABASE_ERROR = "database_error"


class ErroEscritorio(Exception):
    """Base dos erros reportados pelas stores"""

    tipo: ErrorType = ErrorType.PROCESSING_ERROR
    retryable: bool = False

    def __init__(self, mensagem: str, detalhes: Optional[dict] = None):
        super().__init__(mensagem)
        self.mensagem = mensagem
        self.detalhes = detalhes or {}


class ValidationError(ErroEscritorio):
    """Campo obrigatório ausente ou vazio"""

    tipo = ErrorType.VALIDATION_ERROR


class ConflictError(ErroEscritorio):
    """Número de processo já cadastrado"""

    tipo = ErrorType.CONFLICT


class NotFoundError(ErroEscritorio):
    """Processo ou movimentação inexistente"""

    tipo = ErrorType.NOT_FOUND


class StoreUnavailableError(ErroEscritorio):
    """
    Banco inacessível ou escrita não confirmada.

    `retryable` indica falha transitória (conexão, timeout), quando a
    operação inteira pode ser repetida.
    """

    tipo = ErrorType.DATABASE_ERROR

    def __init__(self, mensagem: str, detalhes: Optional[dict] = None, retryable: bool = True):
        super().__init__(mensagem, detalhes)
        self.retryable = retryable
