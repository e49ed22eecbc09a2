"""
Configuração do banco de dados com SQLAlchemy
"""
from contextlib import contextmanager
from typing import Iterator

import logging
import orjson
from sqlalchemy import exc, text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from .config import settings
from .exceptions import ConflictError, StoreUnavailableError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class para todos os models SQLAlchemy"""
    pass


def _json_dumps(valor) -> str:
    return orjson.dumps(valor).decode("utf-8")


class Database:
    """
    Handle do banco compartilhado pelas stores.

    Criado uma vez na inicialização da aplicação e passado explicitamente a
    cada store; `fechar()` libera o pool de conexões.

    Usage:
        db = Database(settings.DATABASE_URL)
        await db.conectar()
        store = ProcessoStore(db)
        ...
        await db.fechar()
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int | None = None,
        max_overflow: int | None = None,
    ):
        opcoes = {
            "echo": echo,
            "pool_pre_ping": True,
            "json_serializer": _json_dumps,
            "json_deserializer": orjson.loads,
        }
        # SQLite (usado nos testes) não aceita parâmetros de pool
        if not url.startswith("sqlite"):
            if pool_size is not None:
                opcoes["pool_size"] = pool_size
            if max_overflow is not None:
                opcoes["max_overflow"] = max_overflow

        self.url = url
        self.engine = create_async_engine(url, **opcoes)
        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls) -> "Database":
        return cls(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
        )

    @property
    def is_postgresql(self) -> bool:
        return self.engine.dialect.name == "postgresql"

    def sessao(self) -> AsyncSession:
        return self.sessionmaker()

    async def conectar(self) -> None:
        """Abre uma conexão de teste; falhas sobem como StoreUnavailableError"""
        with traduzir_erros_banco("conectar ao banco"):
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        logger.info("Conexão com o banco de dados estabelecida")

    async def fechar(self) -> None:
        """Fecha as conexões do banco de dados"""
        await self.engine.dispose()
        logger.info("Conexões do banco de dados fechadas")


@contextmanager
def traduzir_erros_banco(operacao: str) -> Iterator[None]:
    """
    Converte exceções do SQLAlchemy/driver nos erros de domínio.

    Erros de conexão e timeout são transitórios (retryable); os demais erros
    do banco não são.
    """
    try:
        yield
    except exc.IntegrityError as e:
        logger.warning(f"Violação de integridade ao {operacao}: {e.orig}")
        raise ConflictError(
            "Registro conflita com um existente",
            detalhes={"operacao": operacao, "error": str(e.orig)},
        ) from e
    except (exc.OperationalError, exc.InterfaceError, exc.TimeoutError, OSError) as e:
        logger.error(f"Banco indisponível ao {operacao}: {e}")
        raise StoreUnavailableError(
            "Banco de dados indisponível",
            detalhes={"operacao": operacao, "error": str(e)},
            retryable=True,
        ) from e
    except exc.SQLAlchemyError as e:
        logger.error(f"Erro de banco ao {operacao}: {e}")
        raise StoreUnavailableError(
            "Falha ao gravar no banco de dados",
            detalhes={"operacao": operacao, "error": str(e)},
            retryable=False,
        ) from e


def insert_ignorando_conflito(dialeto: str, tabela):
    """
    INSERT ... ON CONFLICT DO NOTHING no dialeto em uso.

    Usado para criar registros únicos (ex: configurações) sem corrida entre
    instâncias.
    """
    if dialeto == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        from sqlalchemy.dialects.sqlite import insert
    return insert(tabela).on_conflict_do_nothing()
