"""
Rotas de leitura da gestão e do calendário
"""
from fastapi import APIRouter, Depends

from ..schemas import PainelGestao, Calendario
from ..services import GestaoService
from .dependencias import get_gestao_service

router = APIRouter()


@router.get(
    "/gestao",
    response_model=PainelGestao,
    summary="Painel de gestão",
    description="Pendentes de manifestação, em execução, movimentações da semana e calendário",
)
async def painel_gestao(service: GestaoService = Depends(get_gestao_service)):
    return await service.painel()


@router.get(
    "/calendario",
    response_model=Calendario,
    summary="Audiências e prazos em aberto",
)
async def calendario(service: GestaoService = Depends(get_gestao_service)):
    return await service.calendario()
