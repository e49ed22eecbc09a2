"""
Garantia de schema e conexão inicial com o banco.

`garantir_schema` pode rodar em toda inicialização: cria o que falta
(tabelas, colunas adicionadas em versões posteriores, índices, registro de
configurações) sem apagar linhas existentes. Contra um schema já atual não
altera nada.
"""
import asyncio
import logging

from sqlalchemy import exc, inspect, update

from .database import Base, Database, traduzir_erros_banco, insert_ignorando_conflito
from .exceptions import StoreUnavailableError
from .models import Processo, Configuracao, CHAVE_CONFIGURACOES
from .services.configuracoes import configuracoes_padrao
from .status import STATUS_INICIAL

logger = logging.getLogger(__name__)


def _colunas_existentes(sync_conn, tabela: str) -> set[str]:
    return {coluna["name"] for coluna in inspect(sync_conn).get_columns(tabela)}


def _ddl_adicionar_coluna(dialect, coluna) -> str:
    """
    ALTER TABLE ... ADD COLUMN para uma coluna do model.

    A coluna entra sempre anulável; defaults não constantes (CURRENT_TIMESTAMP)
    ficam de fora porque o SQLite não os aceita em ADD COLUMN, e o valor das
    linhas antigas vem do preenchimento posterior.
    """
    preparer = dialect.identifier_preparer
    tipo = coluna.type.compile(dialect=dialect)
    ddl = f"ALTER TABLE {preparer.format_table(coluna.table)} ADD COLUMN {preparer.format_column(coluna)} {tipo}"
    if coluna.server_default is not None:
        default = str(coluna.server_default.arg.text)
        if "CURRENT_TIMESTAMP" not in default.upper():
            ddl += f" DEFAULT {default}"
    return ddl


async def _adicionar_colunas(conn) -> list[str]:
    tabela = Processo.__table__
    existentes = await conn.run_sync(_colunas_existentes, tabela.name)
    adicionadas = []
    for coluna in tabela.columns:
        if coluna.name in existentes:
            continue
        await conn.exec_driver_sql(_ddl_adicionar_coluna(conn.dialect, coluna))
        adicionadas.append(coluna.name)
        logger.info(f"Coluna adicionada: {tabela.name}.{coluna.name}")
    return adicionadas


async def _preencher_nulos(conn) -> int:
    """Completa linhas gravadas antes das colunas existirem"""
    tabela = Processo.__table__
    preenchimentos = [
        update(tabela).where(tabela.c.status.is_(None)).values(status=STATUS_INICIAL),
        update(tabela).where(tabela.c.movimentacoes.is_(None)).values(movimentacoes=[]),
        update(tabela).where(tabela.c.links.is_(None)).values(links=[]),
        update(tabela).where(tabela.c.created_at.is_(None)).values(created_at=tabela.c.last_updated),
        update(tabela).where(tabela.c.last_updated.is_(None)).values(last_updated=tabela.c.created_at),
    ]
    total = 0
    for comando in preenchimentos:
        result = await conn.execute(comando)
        total += result.rowcount or 0
    if total:
        logger.info(f"Campos nulos preenchidos em processos antigos: {total}")
    return total


async def _garantir_configuracoes(conn) -> None:
    result = await conn.execute(
        insert_ignorando_conflito(conn.dialect.name, Configuracao.__table__).values(
            key=CHAVE_CONFIGURACOES,
            value=configuracoes_padrao(),
        )
    )
    if result.rowcount:
        logger.info("Configurações padrão do escritório gravadas")


async def _garantir_indices(db: Database) -> None:
    """
    Cria os índices de `processes` que faltam, cada um na sua transação.

    Se números duplicados antigos impedirem o índice único, a unicidade fica
    só na verificação feita pela store.
    """
    for indice in Processo.__table__.indexes:
        try:
            async with db.engine.begin() as conn:
                await conn.run_sync(indice.create, checkfirst=True)
        except exc.IntegrityError as e:
            logger.warning(
                f"Índice {indice.name} não criado por dados duplicados; "
                f"unicidade verificada apenas pela aplicação: {e.orig}"
            )


async def garantir_schema(db: Database) -> list[str]:
    """Cria/atualiza o schema; retorna as colunas adicionadas"""
    with traduzir_erros_banco("garantir schema"):
        async with db.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            adicionadas = await _adicionar_colunas(conn)
            await _preencher_nulos(conn)
            await _garantir_configuracoes(conn)
        await _garantir_indices(db)
    logger.info('Tabelas "processes" e "settings" verificadas/criadas com sucesso')
    return adicionadas


async def conectar_com_retentativas(
    db: Database,
    tentativas: int = 5,
    intervalo: float = 5.0,
) -> None:
    """
    Conecta e garante o schema, tentando novamente em falhas transitórias.

    Esgotadas as tentativas levanta StoreUnavailableError; a aplicação não
    deve começar a atender nesse caso.
    """
    for tentativa in range(1, tentativas + 1):
        try:
            await db.conectar()
            await garantir_schema(db)
            return
        except StoreUnavailableError as e:
            if not e.retryable:
                raise
            logger.warning(
                f"Falha ao conectar ao banco (tentativa {tentativa}/{tentativas}): "
                f"{e.detalhes.get('error', e.mensagem)}"
            )
            if tentativa == tentativas:
                raise StoreUnavailableError(
                    "Não foi possível conectar ao banco de dados após várias tentativas",
                    detalhes={"tentativas": tentativas},
                    retryable=False,
                ) from e
            await asyncio.sleep(intervalo)
