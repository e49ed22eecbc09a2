"""
Schemas Pydantic para validação e serialização
"""
from .erro import ErrorDetail
from .processo import (
    ProcessoCreate,
    ProcessoUpdate,
    FiltroProcessos,
    StatusUpdate,
    MovimentacaoCreate,
    MovimentacaoUpdate,
    LinkCreate,
    MovimentacaoResponse,
    LinkResponse,
    ProcessoResponse,
)
from .gestao import (
    ProcessoResumo,
    MovimentacaoSemana,
    AudienciaCalendario,
    PrazoCalendario,
    Calendario,
    PainelGestao,
)
from .configuracoes import ConfiguracoesResponse, ConfiguracoesUpdate

__all__ = [
    "ErrorDetail",
    "ProcessoCreate",
    "ProcessoUpdate",
    "FiltroProcessos",
    "StatusUpdate",
    "MovimentacaoCreate",
    "MovimentacaoUpdate",
    "LinkCreate",
    "MovimentacaoResponse",
    "LinkResponse",
    "ProcessoResponse",
    "ProcessoResumo",
    "MovimentacaoSemana",
    "AudienciaCalendario",
    "PrazoCalendario",
    "Calendario",
    "PainelGestao",
    "ConfiguracoesResponse",
    "ConfiguracoesUpdate",
]
