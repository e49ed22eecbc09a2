"""
Store de processos: cadastro, movimentações, status e links.

Cada mutação roda numa única transação que trava a linha do processo
(SELECT ... FOR UPDATE no PostgreSQL), valida, calcula as novas listas e o
status a partir do estado travado e grava tudo num só commit. Leitores nunca
veem a movimentação sem o status correspondente.
"""
from datetime import datetime
from typing import Optional
import logging

from sqlalchemy import select, and_, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import Database, traduzir_erros_banco
from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models import Processo
from ..models.processo import agora
from ..schemas import (
    ProcessoCreate,
    ProcessoUpdate,
    FiltroProcessos,
    MovimentacaoCreate,
    MovimentacaoUpdate,
    LinkCreate,
)
from ..status import STATUS_INICIAL, status_apos_movimentacao, normalizar_status
from ..utils import parse_timestamp, texto_opcional

logger = logging.getLogger(__name__)

CAMPOS_OBRIGATORIOS = {
    "numero": "Número do processo é obrigatório",
    "cliente": "Nome do cliente é obrigatório",
}

CAMPOS_EDITAVEIS = (
    "numero",
    "cliente",
    "tribunal",
    "vara",
    "area_direito",
    "proxima_audiencia",
    "modo_audiencia",
    "link_audiencia",
)

# Valor do filtro de tribunal que o front-end usa para "sem filtro"
TRIBUNAL_TODOS = "Todos"


def _texto_obrigatorio(valor: Optional[str], campo: str, mensagem: str) -> str:
    valor = texto_opcional(valor)
    if valor is None:
        raise ValidationError(mensagem, detalhes={"campo": campo})
    return valor


def _padrao_contem(trecho: str) -> str:
    escapado = trecho.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escapado}%"


def _proximo_id(itens: list, momento: datetime) -> int:
    """
    Id derivado do horário em milissegundos, sempre maior que o último da
    lista para manter unicidade dentro do processo.
    """
    ultimo = 0
    for item in itens:
        try:
            ultimo = max(ultimo, int(item.get("id")))
        except (TypeError, ValueError):
            continue
    return max(int(momento.timestamp() * 1000), ultimo + 1)


def _momento_da_movimentacao(movimentacoes: list) -> datetime:
    """Horário da nova movimentação, nunca anterior à última da lista"""
    momento = agora()
    if movimentacoes:
        try:
            anterior = parse_timestamp(movimentacoes[-1].get("timestamp"))
        except (TypeError, ValueError):
            anterior = None
        if anterior is not None and anterior > momento:
            return anterior
    return momento


class ProcessoStore:
    """Operações sobre o registro de processos"""

    def __init__(self, db: Database):
        self.db = db

    # --- Leitura ---

    async def obter_processo(self, processo_id: int) -> Processo:
        with traduzir_erros_banco("buscar processo"):
            async with self.db.sessao() as session:
                result = await session.execute(
                    select(Processo).where(Processo.id == processo_id)
                )
                processo = result.scalar_one_or_none()
        if processo is None:
            raise NotFoundError("Processo não encontrado", detalhes={"processo_id": processo_id})
        return processo

    async def listar_processos(self, filtro: Optional[FiltroProcessos] = None) -> list[Processo]:
        """Lista processos filtrados, do mais recentemente alterado para o mais antigo"""
        filtro = filtro or FiltroProcessos()
        conditions = []

        tribunais = [
            t.strip() for t in (filtro.tribunal or [])
            if t and t.strip() and t.strip() != TRIBUNAL_TODOS
        ]
        if tribunais:
            conditions.append(Processo.tribunal.in_(tribunais))

        vara = texto_opcional(filtro.vara)
        if vara:
            conditions.append(Processo.vara.ilike(_padrao_contem(vara), escape="\\"))

        busca = texto_opcional(filtro.search)
        if busca:
            padrao = _padrao_contem(busca)
            conditions.append(or_(
                Processo.numero.ilike(padrao, escape="\\"),
                Processo.cliente.ilike(padrao, escape="\\"),
            ))

        query = select(Processo)
        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(desc(Processo.last_updated), desc(Processo.id))

        with traduzir_erros_banco("listar processos"):
            async with self.db.sessao() as session:
                result = await session.execute(query)
                return list(result.scalars().all())

    # --- Escrita ---

    async def criar_processo(self, dados: ProcessoCreate) -> Processo:
        numero = _texto_obrigatorio(dados.numero, "numero", CAMPOS_OBRIGATORIOS["numero"])
        cliente = _texto_obrigatorio(dados.cliente, "cliente", CAMPOS_OBRIGATORIOS["cliente"])

        with traduzir_erros_banco("criar processo"):
            async with self.db.sessao() as session:
                async with session.begin():
                    await self._verificar_numero_livre(session, numero)
                    momento = agora()
                    processo = Processo(
                        numero=numero,
                        cliente=cliente,
                        status=STATUS_INICIAL,
                        tribunal=texto_opcional(dados.tribunal),
                        vara=texto_opcional(dados.vara),
                        area_direito=texto_opcional(dados.area_direito),
                        proxima_audiencia=dados.proxima_audiencia,
                        modo_audiencia=texto_opcional(dados.modo_audiencia),
                        link_audiencia=texto_opcional(dados.link_audiencia),
                        movimentacoes=[],
                        links=[],
                        created_at=momento,
                        last_updated=momento,
                    )
                    session.add(processo)

        logger.info(f"Processo criado: id={processo.id}, numero={numero}")
        return processo

    async def atualizar_processo(self, processo_id: int, dados: ProcessoUpdate) -> Processo:
        """Substitui os campos enviados; campos ausentes ficam como estão"""
        enviados = [c for c in CAMPOS_EDITAVEIS if c in dados.model_fields_set]
        novos = {}
        for campo in enviados:
            valor = getattr(dados, campo)
            if campo in CAMPOS_OBRIGATORIOS:
                novos[campo] = _texto_obrigatorio(valor, campo, CAMPOS_OBRIGATORIOS[campo])
            elif isinstance(valor, str):
                novos[campo] = texto_opcional(valor)
            else:
                novos[campo] = valor

        with traduzir_erros_banco("atualizar processo"):
            async with self.db.sessao() as session:
                async with session.begin():
                    processo = await self._carregar_para_atualizacao(session, processo_id)
                    if "numero" in novos and novos["numero"] != processo.numero:
                        await self._verificar_numero_livre(session, novos["numero"], excluir_id=processo_id)
                    for campo, valor in novos.items():
                        setattr(processo, campo, valor)
                    processo.tocar()

        logger.info(f"Processo atualizado: id={processo_id}, campos={enviados}")
        return processo

    async def adicionar_movimentacao(self, processo_id: int, dados: MovimentacaoCreate) -> Processo:
        """
        Acrescenta uma movimentação ao final da lista.

        Com prazo fatal, o status passa a "Pendente de manifestação" no mesmo
        UPDATE que grava a movimentação.
        """
        descricao = _texto_obrigatorio(dados.descricao, "descricao", "Descrição da movimentação é obrigatória")

        with traduzir_erros_banco("adicionar movimentação"):
            async with self.db.sessao() as session:
                async with session.begin():
                    processo = await self._carregar_para_atualizacao(session, processo_id)
                    anteriores = list(processo.movimentacoes or [])
                    momento = _momento_da_movimentacao(anteriores)
                    nova = {
                        "id": _proximo_id(anteriores, momento),
                        "descricao": descricao,
                        "timestamp": momento.isoformat(),
                        "prazo_fatal": dados.prazo_fatal.isoformat() if dados.prazo_fatal else None,
                        "concluido": False,
                    }
                    processo.movimentacoes = anteriores + [nova]
                    processo.status = status_apos_movimentacao(processo.status, dados.prazo_fatal)
                    processo.tocar(momento)

        logger.info(
            f"Movimentação adicionada: processo={processo_id}, "
            f"movimentacao={nova['id']}, status={processo.status}"
        )
        return processo

    async def atualizar_movimentacao(
        self,
        processo_id: int,
        movimentacao_id: int,
        dados: MovimentacaoUpdate,
    ) -> Processo:
        """Edita descrição/conclusão de uma movimentação; o status não muda"""
        alteracoes = {}
        if "descricao" in dados.model_fields_set:
            alteracoes["descricao"] = _texto_obrigatorio(
                dados.descricao, "descricao", "Descrição da movimentação é obrigatória"
            )
        if "concluido" in dados.model_fields_set and dados.concluido is not None:
            alteracoes["concluido"] = dados.concluido

        with traduzir_erros_banco("atualizar movimentação"):
            async with self.db.sessao() as session:
                async with session.begin():
                    processo = await self._carregar_para_atualizacao(session, processo_id)
                    if processo.buscar_movimentacao(movimentacao_id) is None:
                        raise NotFoundError(
                            "Movimentação não encontrada",
                            detalhes={"processo_id": processo_id, "movimentacao_id": movimentacao_id},
                        )
                    # Cópias: a lista carregada é o estado original comparado no flush
                    movimentacoes = []
                    for mov in processo.movimentacoes:
                        mov = dict(mov)
                        if str(mov.get("id")) == str(movimentacao_id):
                            mov.update(alteracoes)
                        movimentacoes.append(mov)
                    processo.movimentacoes = movimentacoes
                    processo.tocar()

        logger.info(f"Movimentação atualizada: processo={processo_id}, movimentacao={movimentacao_id}")
        return processo

    async def definir_status(self, processo_id: int, status: Optional[str]) -> Processo:
        status = normalizar_status(status)

        with traduzir_erros_banco("atualizar status"):
            async with self.db.sessao() as session:
                async with session.begin():
                    processo = await self._carregar_para_atualizacao(session, processo_id)
                    anterior = processo.status
                    processo.status = status
                    processo.tocar()

        logger.info(f"Status alterado: processo={processo_id}, de={anterior!r} para={status!r}")
        return processo

    async def adicionar_link(self, processo_id: int, dados: LinkCreate) -> Processo:
        url = _texto_obrigatorio(dados.url, "url", "URL do link é obrigatória")
        descricao = _texto_obrigatorio(dados.descricao, "descricao", "Descrição do link é obrigatória")

        with traduzir_erros_banco("adicionar link"):
            async with self.db.sessao() as session:
                async with session.begin():
                    processo = await self._carregar_para_atualizacao(session, processo_id)
                    anteriores = list(processo.links or [])
                    momento = agora()
                    novo = {"id": _proximo_id(anteriores, momento), "url": url, "descricao": descricao}
                    processo.links = anteriores + [novo]
                    processo.tocar(momento)

        logger.info(f"Link adicionado: processo={processo_id}, link={novo['id']}")
        return processo

    async def remover_link(self, processo_id: int, link_id: int) -> Processo:
        """Remove o link pelo id; link inexistente não é erro"""
        with traduzir_erros_banco("remover link"):
            async with self.db.sessao() as session:
                async with session.begin():
                    processo = await self._carregar_para_atualizacao(session, processo_id)
                    links = list(processo.links or [])
                    restantes = [link for link in links if str(link.get("id")) != str(link_id)]
                    removido = len(restantes) != len(links)
                    if removido:
                        processo.links = restantes
                        processo.tocar()

        if removido:
            logger.info(f"Link removido: processo={processo_id}, link={link_id}")
        else:
            logger.debug(f"Link já ausente: processo={processo_id}, link={link_id}")
        return processo

    # --- Helpers ---

    async def _carregar_para_atualizacao(self, session: AsyncSession, processo_id: int) -> Processo:
        result = await session.execute(
            select(Processo).where(Processo.id == processo_id).with_for_update()
        )
        processo = result.scalar_one_or_none()
        if processo is None:
            raise NotFoundError("Processo não encontrado", detalhes={"processo_id": processo_id})
        return processo

    async def _verificar_numero_livre(
        self,
        session: AsyncSession,
        numero: str,
        excluir_id: Optional[int] = None,
    ) -> None:
        query = select(Processo.id).where(Processo.numero == numero)
        if excluir_id is not None:
            query = query.where(Processo.id != excluir_id)
        result = await session.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError(
                "Já existe um processo com este número",
                detalhes={"numero": numero},
            )
