"""
Model SQLAlchemy para processos do escritório
"""
from sqlalchemy import Column, Integer, String, Date, JSON, TIMESTAMP, Index, text
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime, timezone

from ..database import Base
from ..status import STATUS_INICIAL

# JSONB no PostgreSQL, JSON genérico nos demais dialetos
ListaJSON = JSON().with_variant(JSONB(), "postgresql")


def agora() -> datetime:
    return datetime.now(timezone.utc)


class Processo(Base):
    """
    Model para processos acompanhados pelo escritório

    Movimentações e links ficam embutidos na própria linha como listas
    JSON ordenadas.
    """
    __tablename__ = "processes"

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Identificador do processo"
    )

    numero = Column(
        String(255),
        nullable=False,
        comment="Número do processo"
    )

    cliente = Column(
        String(255),
        nullable=False,
        comment="Nome do cliente"
    )

    status = Column(
        String(255),
        nullable=True,
        default=STATUS_INICIAL,
        comment="Situação atual do processo"
    )

    tribunal = Column(String(255), nullable=True, comment="Tribunal")

    vara = Column(String(255), nullable=True, comment="Vara")

    area_direito = Column(String(255), nullable=True, comment="Área do direito")

    proxima_audiencia = Column(
        Date,
        nullable=True,
        comment="Data da próxima audiência"
    )

    modo_audiencia = Column(
        String(50),
        nullable=True,
        comment="Formato da audiência (presencial, virtual)"
    )

    link_audiencia = Column(
        String(1024),
        nullable=True,
        comment="Link da audiência virtual"
    )

    movimentacoes = Column(
        ListaJSON,
        nullable=True,
        default=list,
        server_default=text("'[]'"),
        comment="Movimentações em ordem de inclusão"
    )

    links = Column(
        ListaJSON,
        nullable=True,
        default=list,
        server_default=text("'[]'"),
        comment="Links externos do processo"
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=True,
        default=agora,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="Data e hora de criação"
    )

    last_updated = Column(
        TIMESTAMP(timezone=True),
        nullable=True,
        default=agora,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="Data e hora da última alteração"
    )

    __table_args__ = (
        Index('uq_processes_numero', 'numero', unique=True),
        Index('idx_processes_status', 'status'),
        Index('idx_processes_last_updated', 'last_updated'),
        {'comment': 'Tabela de processos do escritório'}
    )

    def __repr__(self) -> str:
        return (
            f"<Processo("
            f"id={self.id}, "
            f"numero={self.numero}, "
            f"status={self.status}"
            f")>"
        )

    def tocar(self, momento: datetime | None = None) -> None:
        """Atualiza last_updated; toda mutação passa por aqui"""
        self.last_updated = momento or agora()

    def buscar_movimentacao(self, movimentacao_id: int) -> dict | None:
        for mov in self.movimentacoes or []:
            if str(mov.get("id")) == str(movimentacao_id):
                return mov
        return None
