"""
Schemas Pydantic para as visões de gestão e calendário
"""
from pydantic import BaseModel
import datetime as dt
from typing import Optional


class ProcessoResumo(BaseModel):
    id: int
    numero: str
    cliente: str


class MovimentacaoSemana(BaseModel):
    processo_id: int
    numero: str
    id: int
    descricao: str
    timestamp: dt.datetime
    prazo_fatal: Optional[dt.date] = None
    concluido: bool = False


class AudienciaCalendario(BaseModel):
    processo_id: int
    numero: str
    cliente: str
    date: dt.date


class PrazoCalendario(BaseModel):
    processo_id: int
    movimentacao_id: int
    numero: str
    cliente: str
    descricao: str
    date: dt.date


class Calendario(BaseModel):
    audiencias: list[AudienciaCalendario] = []
    prazos: list[PrazoCalendario] = []


class PainelGestao(BaseModel):
    """Resposta agregada da tela de gestão"""
    pendentes: list[ProcessoResumo] = []
    execucao: list[ProcessoResumo] = []
    semana: list[MovimentacaoSemana] = []
    calendario: Calendario = Calendario()
