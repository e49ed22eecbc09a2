"""
Rotas para processos, movimentações e links
"""
from fastapi import APIRouter, Depends, Query

from ..schemas import (
    ProcessoCreate,
    ProcessoUpdate,
    FiltroProcessos,
    StatusUpdate,
    MovimentacaoCreate,
    MovimentacaoUpdate,
    LinkCreate,
    ProcessoResponse,
)
from ..services import ProcessoStore
from .dependencias import get_processo_store

router = APIRouter()


@router.get(
    "",
    response_model=list[ProcessoResponse],
    summary="Listar processos",
    description="Lista processos com filtros opcionais, do mais recentemente alterado ao mais antigo",
)
async def listar_processos(
    tribunal: list[str] | None = Query(None, description="Tribunal (repita o parâmetro para vários)"),
    vara: str | None = Query(None, description="Trecho do nome da vara"),
    search: str | None = Query(None, description="Trecho do número ou do cliente"),
    store: ProcessoStore = Depends(get_processo_store),
):
    filtro = FiltroProcessos(tribunal=tribunal, vara=vara, search=search)
    return await store.listar_processos(filtro)


@router.post(
    "",
    response_model=ProcessoResponse,
    status_code=201,
    summary="Criar processo",
)
async def criar_processo(
    dados: ProcessoCreate,
    store: ProcessoStore = Depends(get_processo_store),
):
    return await store.criar_processo(dados)


@router.get(
    "/{processo_id}",
    response_model=ProcessoResponse,
    summary="Detalhes do processo",
)
async def obter_processo(
    processo_id: int,
    store: ProcessoStore = Depends(get_processo_store),
):
    return await store.obter_processo(processo_id)


@router.put(
    "/{processo_id}",
    response_model=ProcessoResponse,
    summary="Atualizar informações gerais do processo",
)
async def atualizar_processo(
    processo_id: int,
    dados: ProcessoUpdate,
    store: ProcessoStore = Depends(get_processo_store),
):
    return await store.atualizar_processo(processo_id, dados)


@router.post(
    "/{processo_id}/movimentacoes",
    response_model=ProcessoResponse,
    summary="Adicionar movimentação",
    description="Com prazo fatal, o processo passa a 'Pendente de manifestação'",
)
async def adicionar_movimentacao(
    processo_id: int,
    dados: MovimentacaoCreate,
    store: ProcessoStore = Depends(get_processo_store),
):
    return await store.adicionar_movimentacao(processo_id, dados)


@router.put(
    "/{processo_id}/movimentacoes/{movimentacao_id}",
    response_model=ProcessoResponse,
    summary="Editar ou concluir movimentação",
)
async def atualizar_movimentacao(
    processo_id: int,
    movimentacao_id: int,
    dados: MovimentacaoUpdate,
    store: ProcessoStore = Depends(get_processo_store),
):
    return await store.atualizar_movimentacao(processo_id, movimentacao_id, dados)


@router.put(
    "/{processo_id}/status",
    response_model=ProcessoResponse,
    summary="Atualizar status do processo",
)
async def definir_status(
    processo_id: int,
    dados: StatusUpdate,
    store: ProcessoStore = Depends(get_processo_store),
):
    return await store.definir_status(processo_id, dados.status)


@router.post(
    "/{processo_id}/links",
    response_model=ProcessoResponse,
    summary="Adicionar link",
)
async def adicionar_link(
    processo_id: int,
    dados: LinkCreate,
    store: ProcessoStore = Depends(get_processo_store),
):
    return await store.adicionar_link(processo_id, dados)


@router.delete(
    "/{processo_id}/links/{link_id}",
    response_model=ProcessoResponse,
    summary="Remover link",
    description="Remover um link que não existe não é erro",
)
async def remover_link(
    processo_id: int,
    link_id: int,
    store: ProcessoStore = Depends(get_processo_store),
):
    return await store.remover_link(processo_id, link_id)
