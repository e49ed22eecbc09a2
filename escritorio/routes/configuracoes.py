"""
Rotas das configurações do escritório
"""
from fastapi import APIRouter, Depends

from ..schemas import ConfiguracoesResponse, ConfiguracoesUpdate
from ..services import ConfiguracoesStore
from .dependencias import get_configuracoes_store

router = APIRouter()


@router.get(
    "",
    response_model=ConfiguracoesResponse,
    summary="Obter configurações",
)
async def obter_configuracoes(store: ConfiguracoesStore = Depends(get_configuracoes_store)):
    return await store.obter_configuracoes()


@router.post(
    "",
    response_model=ConfiguracoesResponse,
    summary="Salvar configurações",
    description="Mescla os campos enviados nas configurações existentes",
)
async def salvar_configuracoes(
    dados: ConfiguracoesUpdate,
    store: ConfiguracoesStore = Depends(get_configuracoes_store),
):
    return await store.salvar_configuracoes(dados)
