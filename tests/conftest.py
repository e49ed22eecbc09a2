"""Configuração de testes (pytest).

Os testes usam um arquivo SQLite temporário (driver aiosqlite) no lugar do
PostgreSQL; o schema é criado pelo mesmo bootstrap da aplicação.
"""

import pytest
import pytest_asyncio

from escritorio.bootstrap import garantir_schema
from escritorio.database import Database
from escritorio.schemas import ProcessoCreate
from escritorio.services import ProcessoStore, ConfiguracoesStore, GestaoService


def sqlite_url(tmp_path, nome: str = "escritorio.db") -> str:
    return f"sqlite+aiosqlite:///{tmp_path / nome}"


@pytest_asyncio.fixture
async def db_vazio(tmp_path):
    """Banco sem schema, para testar o bootstrap."""
    database = Database(sqlite_url(tmp_path))
    yield database
    await database.fechar()


@pytest_asyncio.fixture
async def db(db_vazio):
    await garantir_schema(db_vazio)
    return db_vazio


@pytest.fixture
def store(db):
    return ProcessoStore(db)


@pytest.fixture
def configuracoes(db):
    return ConfiguracoesStore(db)


@pytest.fixture
def gestao(db):
    return GestaoService(db, fuso="America/Sao_Paulo")


@pytest.fixture
def novo_processo(store):
    """Cria um processo com valores padrão e overrides."""

    async def _criar(**overrides):
        dados = {"numero": "0001234-56.2024.8.26.0100", "cliente": "Acme Ltda"}
        dados.update(overrides)
        return await store.criar_processo(ProcessoCreate(**dados))

    return _criar
