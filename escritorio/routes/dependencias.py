"""
Dependências FastAPI que entregam as stores criadas no lifespan
"""
from fastapi import Request

from ..services import ProcessoStore, ConfiguracoesStore, GestaoService


def get_processo_store(request: Request) -> ProcessoStore:
    return request.app.state.processos


def get_configuracoes_store(request: Request) -> ConfiguracoesStore:
    return request.app.state.configuracoes


def get_gestao_service(request: Request) -> GestaoService:
    return request.app.state.gestao
