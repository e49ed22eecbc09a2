"""
Visões de gestão calculadas a partir do registro de processos.

Nada é guardado entre chamadas: cada visão lê o banco no momento da chamada.
As visões não formam um snapshot único entre linhas; cada processo aparece
no último estado confirmado quando foi lido.
"""
from datetime import datetime, timedelta
from typing import Optional
import logging

from sqlalchemy import select, desc

from ..config import settings
from ..database import Database, traduzir_erros_banco
from ..models import Processo
from ..schemas import (
    ProcessoResumo,
    MovimentacaoSemana,
    AudienciaCalendario,
    PrazoCalendario,
    Calendario,
    PainelGestao,
)
from ..status import STATUS_PENDENTE_MANIFESTACAO, STATUS_EM_EXECUCAO
from ..utils import parse_timestamp, parse_data, inicio_da_semana
from ..models.processo import agora as agora_utc

logger = logging.getLogger(__name__)


def _datas_da_movimentacao(mov: dict, processo_id: int) -> Optional[tuple]:
    """Timestamp e prazo fatal já convertidos; None se algum deles estiver ilegível"""
    try:
        return parse_timestamp(mov.get("timestamp")), parse_data(mov.get("prazo_fatal"))
    except (TypeError, ValueError) as e:
        logger.warning(
            f"Movimentação com data inválida ignorada: processo={processo_id}, "
            f"movimentacao={mov.get('id')}, erro={e}"
        )
        return None


class GestaoService:
    """Fila de pendências, fila de execução, resumo semanal e calendário"""

    def __init__(self, db: Database, fuso: Optional[str] = None):
        self.db = db
        self.fuso = fuso or settings.TIMEZONE

    async def pendentes_manifestacao(self) -> list[ProcessoResumo]:
        return await self._por_status(STATUS_PENDENTE_MANIFESTACAO)

    async def em_execucao(self) -> list[ProcessoResumo]:
        return await self._por_status(STATUS_EM_EXECUCAO)

    async def movimentacoes_da_semana(self, agora: Optional[datetime] = None) -> list[MovimentacaoSemana]:
        """
        Movimentações de todos os processos feitas na semana corrente.

        A semana começa na segunda-feira à meia-noite (fuso do escritório) e
        dura sete dias; ordem do timestamp mais recente para o mais antigo.
        """
        inicio = inicio_da_semana(agora or agora_utc(), self.fuso)
        fim = inicio + timedelta(days=7)

        linhas = []
        for processo_id, numero, _, movimentacoes, _ in await self._ler_ledger():
            for mov in movimentacoes or []:
                datas = _datas_da_movimentacao(mov, processo_id)
                if datas is None:
                    continue
                momento, prazo = datas
                if momento is None or not (inicio <= momento < fim):
                    continue
                linhas.append(MovimentacaoSemana(
                    processo_id=processo_id,
                    numero=numero,
                    id=mov.get("id"),
                    descricao=mov.get("descricao") or "",
                    timestamp=momento,
                    prazo_fatal=prazo,
                    concluido=bool(mov.get("concluido", False)),
                ))

        linhas.sort(key=lambda linha: linha.timestamp, reverse=True)
        return linhas

    async def calendario(self) -> Calendario:
        """
        Audiências marcadas e prazos fatais em aberto, por data.

        Movimentações concluídas não entram na lista de prazos.
        """
        audiencias = []
        prazos = []
        for processo_id, numero, cliente, movimentacoes, proxima_audiencia in await self._ler_ledger():
            if proxima_audiencia is not None:
                audiencias.append(AudienciaCalendario(
                    processo_id=processo_id,
                    numero=numero,
                    cliente=cliente,
                    date=proxima_audiencia,
                ))
            for mov in movimentacoes or []:
                datas = _datas_da_movimentacao(mov, processo_id)
                if datas is None:
                    continue
                _, prazo = datas
                if prazo is None or mov.get("concluido"):
                    continue
                prazos.append(PrazoCalendario(
                    processo_id=processo_id,
                    movimentacao_id=mov.get("id"),
                    numero=numero,
                    cliente=cliente,
                    descricao=mov.get("descricao") or "",
                    date=prazo,
                ))

        audiencias.sort(key=lambda a: (a.date, a.numero))
        prazos.sort(key=lambda p: (p.date, p.numero))
        return Calendario(audiencias=audiencias, prazos=prazos)

    async def painel(self) -> PainelGestao:
        return PainelGestao(
            pendentes=await self.pendentes_manifestacao(),
            execucao=await self.em_execucao(),
            semana=await self.movimentacoes_da_semana(),
            calendario=await self.calendario(),
        )

    # --- Helpers ---

    async def _por_status(self, status: str) -> list[ProcessoResumo]:
        query = (
            select(Processo.id, Processo.numero, Processo.cliente)
            .where(Processo.status == status)
            .order_by(desc(Processo.last_updated), desc(Processo.id))
        )
        with traduzir_erros_banco(f"listar processos com status {status}"):
            async with self.db.sessao() as session:
                result = await session.execute(query)
                rows = result.all()
        return [ProcessoResumo(id=row.id, numero=row.numero, cliente=row.cliente) for row in rows]

    async def _ler_ledger(self) -> list:
        query = select(
            Processo.id,
            Processo.numero,
            Processo.cliente,
            Processo.movimentacoes,
            Processo.proxima_audiencia,
        )
        with traduzir_erros_banco("ler movimentações"):
            async with self.db.sessao() as session:
                result = await session.execute(query)
                return list(result.all())
