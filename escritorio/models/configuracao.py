"""
Model SQLAlchemy para as configurações do escritório
"""
from sqlalchemy import Column, String, JSON
from sqlalchemy.dialects.postgresql import JSONB

from ..database import Base

CHAVE_CONFIGURACOES = "office_settings"


class Configuracao(Base):
    """
    Registro chave/valor de configurações

    O escritório usa uma única chave (`office_settings`) cujo valor é um
    objeto JSON com o logo e os links do menu.
    """
    __tablename__ = "settings"

    key = Column(
        String(255),
        primary_key=True,
        comment="Chave da configuração"
    )

    value = Column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
        comment="Valor JSON da configuração"
    )

    __table_args__ = (
        {'comment': 'Tabela de configurações do escritório'},
    )

    def __repr__(self) -> str:
        return f"<Configuracao(key={self.key})>"
