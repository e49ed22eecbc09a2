"""Testes da store de processos.

Cobertura principal:
    - Criação com status inicial e validação/conflito de número
    - Movimentação com e sem prazo fatal
    - Edição de movimentação sem efeito no status
    - Links (inclusão e remoção idempotente)
    - Listagem filtrada e ordenada por last_updated
"""

from datetime import date

import pytest

from escritorio.exceptions import ConflictError, NotFoundError, ValidationError
from escritorio.models import Processo
from escritorio.services import processos as processos_service
from escritorio.schemas import (
    FiltroProcessos,
    LinkCreate,
    MovimentacaoCreate,
    MovimentacaoUpdate,
    ProcessoCreate,
    ProcessoUpdate,
)
from escritorio.status import STATUS_EM_EXECUCAO, STATUS_INICIAL, STATUS_PENDENTE_MANIFESTACAO
from escritorio.utils import parse_timestamp


# --- Criação ---

async def test_criar_processo_comeca_distribuido_e_sem_listas(novo_processo):
    processo = await novo_processo(numero="123", cliente="Acme", tribunal="TJSP")

    assert processo.id is not None
    assert processo.status == STATUS_INICIAL
    assert processo.movimentacoes == []
    assert processo.links == []
    assert processo.tribunal == "TJSP"
    assert processo.last_updated >= processo.created_at


@pytest.mark.parametrize("campos", [
    {"numero": "", "cliente": "Acme"},
    {"numero": "123", "cliente": "   "},
    {"cliente": "Acme"},
    {"numero": "123"},
])
async def test_criar_processo_sem_numero_ou_cliente(store, campos):
    with pytest.raises(ValidationError):
        await store.criar_processo(ProcessoCreate(**campos))

    assert await store.listar_processos() == []


async def test_criar_processo_com_numero_repetido_e_conflito(store, novo_processo):
    await novo_processo(numero="123")

    with pytest.raises(ConflictError):
        await novo_processo(numero="123", cliente="Outro")

    assert len(await store.listar_processos()) == 1


async def test_obter_processo_inexistente(store):
    with pytest.raises(NotFoundError):
        await store.obter_processo(999)


# --- Atualização de campos ---

async def test_atualizar_processo_altera_so_os_campos_enviados(store, novo_processo):
    processo = await novo_processo(tribunal="TJSP", vara="2ª Vara Cível")

    atualizado = await store.atualizar_processo(
        processo.id,
        ProcessoUpdate(cliente="Acme S/A", proxima_audiencia=date(2025, 3, 1), vara=None),
    )

    assert atualizado.cliente == "Acme S/A"
    assert atualizado.proxima_audiencia == date(2025, 3, 1)
    assert atualizado.vara is None
    assert atualizado.tribunal == "TJSP"
    assert atualizado.numero == processo.numero
    assert atualizado.last_updated > processo.last_updated


async def test_atualizar_processo_nao_aceita_numero_vazio(store, novo_processo):
    processo = await novo_processo()

    with pytest.raises(ValidationError):
        await store.atualizar_processo(processo.id, ProcessoUpdate(numero=""))

    assert (await store.obter_processo(processo.id)).numero == processo.numero


async def test_atualizar_processo_para_numero_de_outro_e_conflito(store, novo_processo):
    await novo_processo(numero="111")
    segundo = await novo_processo(numero="222")

    with pytest.raises(ConflictError):
        await store.atualizar_processo(segundo.id, ProcessoUpdate(numero="111"))


async def test_atualizar_processo_mantendo_o_proprio_numero(store, novo_processo):
    processo = await novo_processo(numero="111")

    atualizado = await store.atualizar_processo(processo.id, ProcessoUpdate(numero="111", cliente="Novo"))

    assert atualizado.cliente == "Novo"


async def test_atualizar_processo_inexistente(store):
    with pytest.raises(NotFoundError):
        await store.atualizar_processo(999, ProcessoUpdate(cliente="X"))


# --- Movimentações ---

async def test_movimentacao_com_prazo_coloca_pendente(store, novo_processo):
    processo = await novo_processo()

    atualizado = await store.adicionar_movimentacao(
        processo.id,
        MovimentacaoCreate(descricao="Petição", prazo_fatal=date(2025, 1, 10)),
    )

    assert atualizado.status == STATUS_PENDENTE_MANIFESTACAO
    assert len(atualizado.movimentacoes) == 1
    mov = atualizado.movimentacoes[0]
    assert mov["descricao"] == "Petição"
    assert mov["prazo_fatal"] == "2025-01-10"
    assert mov["concluido"] is False

    # Leitura independente vê movimentação e status juntos
    lido = await store.obter_processo(processo.id)
    assert lido.status == STATUS_PENDENTE_MANIFESTACAO
    assert len(lido.movimentacoes) == 1


async def test_movimentacao_sem_prazo_nao_muda_status(store, novo_processo):
    processo = await novo_processo()
    await store.definir_status(processo.id, STATUS_EM_EXECUCAO)

    atualizado = await store.adicionar_movimentacao(processo.id, MovimentacaoCreate(descricao="Juntada"))

    assert atualizado.status == STATUS_EM_EXECUCAO
    assert atualizado.movimentacoes[0]["prazo_fatal"] is None


async def test_movimentacoes_em_ordem_com_ids_unicos_e_timestamps_crescentes(store, novo_processo):
    processo = await novo_processo()
    for i in range(5):
        processo = await store.adicionar_movimentacao(processo.id, MovimentacaoCreate(descricao=f"Mov {i}"))

    movs = (await store.obter_processo(processo.id)).movimentacoes
    assert [m["descricao"] for m in movs] == [f"Mov {i}" for i in range(5)]
    ids = [m["id"] for m in movs]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5
    timestamps = [parse_timestamp(m["timestamp"]) for m in movs]
    assert all(a <= b for a, b in zip(timestamps, timestamps[1:]))


async def test_movimentacao_sem_descricao(store, novo_processo):
    processo = await novo_processo()

    with pytest.raises(ValidationError):
        await store.adicionar_movimentacao(processo.id, MovimentacaoCreate(descricao=" ", prazo_fatal=date(2025, 1, 10)))

    lido = await store.obter_processo(processo.id)
    assert lido.movimentacoes == []
    assert lido.status == STATUS_INICIAL


async def test_movimentacao_em_processo_inexistente(store):
    with pytest.raises(NotFoundError):
        await store.adicionar_movimentacao(999, MovimentacaoCreate(descricao="Petição"))


async def test_falha_antes_do_commit_desfaz_a_movimentacao(store, novo_processo, monkeypatch):
    """Movimentação e status são gravados juntos ou não são gravados."""
    processo = await novo_processo()

    def _falha(status_atual, prazo_fatal):
        raise RuntimeError("falha no meio da transação")

    monkeypatch.setattr(processos_service, "status_apos_movimentacao", _falha)

    with pytest.raises(RuntimeError):
        await store.adicionar_movimentacao(
            processo.id, MovimentacaoCreate(descricao="Petição", prazo_fatal=date(2025, 1, 10))
        )

    lido = await store.obter_processo(processo.id)
    assert lido.movimentacoes == []
    assert lido.status == STATUS_INICIAL


async def test_concluir_movimentacao_nao_limpa_pendencia(store, novo_processo):
    processo = await novo_processo()
    processo = await store.adicionar_movimentacao(
        processo.id, MovimentacaoCreate(descricao="Petição", prazo_fatal=date(2025, 1, 10))
    )
    processo = await store.adicionar_movimentacao(processo.id, MovimentacaoCreate(descricao="Outra"))
    mov_id = processo.movimentacoes[0]["id"]

    atualizado = await store.atualizar_movimentacao(processo.id, mov_id, MovimentacaoUpdate(concluido=True))

    assert atualizado.movimentacoes[0]["concluido"] is True
    assert atualizado.movimentacoes[0]["descricao"] == "Petição"
    assert atualizado.movimentacoes[1]["concluido"] is False
    assert atualizado.status == STATUS_PENDENTE_MANIFESTACAO

    lido = await store.obter_processo(processo.id)
    assert lido.movimentacoes[0]["concluido"] is True


async def test_editar_descricao_da_movimentacao(store, novo_processo):
    processo = await novo_processo()
    processo = await store.adicionar_movimentacao(processo.id, MovimentacaoCreate(descricao="Peticao"))
    mov_id = processo.movimentacoes[0]["id"]

    atualizado = await store.atualizar_movimentacao(processo.id, mov_id, MovimentacaoUpdate(descricao="Petição inicial"))

    assert atualizado.movimentacoes[0]["descricao"] == "Petição inicial"
    assert atualizado.movimentacoes[0]["id"] == mov_id


async def test_atualizar_movimentacao_inexistente(store, novo_processo):
    processo = await novo_processo()

    with pytest.raises(NotFoundError):
        await store.atualizar_movimentacao(processo.id, 42, MovimentacaoUpdate(concluido=True))
    with pytest.raises(NotFoundError):
        await store.atualizar_movimentacao(999, 42, MovimentacaoUpdate(concluido=True))


# --- Status ---

async def test_definir_status_ultima_escrita_vale(store, novo_processo):
    processo = await novo_processo()

    await store.definir_status(processo.id, "Em andamento")
    atualizado = await store.definir_status(processo.id, STATUS_EM_EXECUCAO)

    assert atualizado.status == STATUS_EM_EXECUCAO
    assert (await store.obter_processo(processo.id)).status == STATUS_EM_EXECUCAO


async def test_definir_status_vazio_ou_processo_inexistente(store, novo_processo):
    processo = await novo_processo()

    with pytest.raises(ValidationError):
        await store.definir_status(processo.id, "")
    with pytest.raises(NotFoundError):
        await store.definir_status(999, STATUS_EM_EXECUCAO)


# --- Links ---

async def test_adicionar_e_remover_link(store, novo_processo):
    processo = await novo_processo()

    processo = await store.adicionar_link(processo.id, LinkCreate(url="https://esaj.tjsp.jus.br", descricao="e-SAJ"))
    processo = await store.adicionar_link(processo.id, LinkCreate(url="https://drive.example.com", descricao="Pasta"))
    assert [link["descricao"] for link in processo.links] == ["e-SAJ", "Pasta"]
    assert processo.links[0]["id"] != processo.links[1]["id"]

    atualizado = await store.remover_link(processo.id, processo.links[0]["id"])

    assert [link["descricao"] for link in atualizado.links] == ["Pasta"]


async def test_remover_link_ausente_e_idempotente(store, novo_processo):
    processo = await novo_processo()
    processo = await store.adicionar_link(processo.id, LinkCreate(url="https://a", descricao="A"))

    primeiro = await store.remover_link(processo.id, 123)
    segundo = await store.remover_link(processo.id, 123)

    assert primeiro.links == processo.links
    assert segundo.links == processo.links


async def test_link_sem_url_e_processo_inexistente(store, novo_processo):
    processo = await novo_processo()

    with pytest.raises(ValidationError):
        await store.adicionar_link(processo.id, LinkCreate(url="", descricao="A"))
    with pytest.raises(NotFoundError):
        await store.remover_link(999, 1)


async def test_falha_antes_do_commit_desfaz_o_link(store, novo_processo, monkeypatch):
    processo = await novo_processo()

    def _falha(self, momento=None):
        raise RuntimeError("falha no meio da transação")

    monkeypatch.setattr(Processo, "tocar", _falha)

    with pytest.raises(RuntimeError):
        await store.adicionar_link(processo.id, LinkCreate(url="https://a", descricao="A"))

    monkeypatch.undo()
    lido = await store.obter_processo(processo.id)
    assert lido.links == []


# --- Listagem ---

async def test_listar_ordenado_por_ultima_alteracao(store, novo_processo):
    a = await novo_processo(numero="A", cliente="Cliente A")
    b = await novo_processo(numero="B", cliente="Cliente B")
    c = await novo_processo(numero="C", cliente="Cliente C")

    await store.adicionar_movimentacao(a.id, MovimentacaoCreate(descricao="Mexeu em A"))

    processos = await store.listar_processos()
    assert [p.numero for p in processos] == ["A", "C", "B"]
    datas = [p.last_updated for p in processos]
    assert all(x >= y for x, y in zip(datas, datas[1:]))
    assert {b.id, c.id} <= {p.id for p in processos}


async def test_listar_filtra_por_tribunal_vara_e_busca(store, novo_processo):
    await novo_processo(numero="100", cliente="Maria Silva", tribunal="TJSP", vara="1ª Vara Cível")
    await novo_processo(numero="200", cliente="João Souza", tribunal="TRT2", vara="5ª Vara do Trabalho")
    await novo_processo(numero="300", cliente="Acme", tribunal="TJRJ", vara="2ª Vara Cível")

    def numeros(processos):
        return sorted(p.numero for p in processos)

    assert numeros(await store.listar_processos(FiltroProcessos(tribunal="TJSP"))) == ["100"]
    assert numeros(await store.listar_processos(FiltroProcessos(tribunal=["TJSP", "TRT2"]))) == ["100", "200"]
    assert numeros(await store.listar_processos(FiltroProcessos(tribunal="Todos"))) == ["100", "200", "300"]
    assert numeros(await store.listar_processos(FiltroProcessos(vara="cível"))) == ["100", "300"]
    assert numeros(await store.listar_processos(FiltroProcessos(vara="trabalho"))) == ["200"]
    assert numeros(await store.listar_processos(FiltroProcessos(search="silva"))) == ["100"]
    assert numeros(await store.listar_processos(FiltroProcessos(search="30"))) == ["300"]
    assert numeros(await store.listar_processos(FiltroProcessos(tribunal="TJRJ", vara="trabalho"))) == []


async def test_busca_trata_curinga_como_texto(store, novo_processo):
    await novo_processo(numero="100", cliente="Cem por cento")
    await novo_processo(numero="200", cliente="100% Ltda")

    processos = await store.listar_processos(FiltroProcessos(search="100%"))

    assert [p.numero for p in processos] == ["200"]
