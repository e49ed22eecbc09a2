"""
Store das configurações do escritório (registro único `office_settings`)
"""
from typing import Optional
import copy
import logging

from sqlalchemy import select

from ..database import Database, traduzir_erros_banco, insert_ignorando_conflito
from ..models import Configuracao, CHAVE_CONFIGURACOES
from ..schemas import ConfiguracoesResponse, ConfiguracoesUpdate

logger = logging.getLogger(__name__)

CONFIGURACOES_PADRAO = {
    "logo_url": "",
    "custom_menu_links": [],
}


def configuracoes_padrao() -> dict:
    return copy.deepcopy(CONFIGURACOES_PADRAO)


def _sem_nulos(valor: Optional[dict]) -> dict:
    """Registros antigos podem ter campos gravados como null; o padrão vale para eles"""
    return {chave: item for chave, item in (valor or {}).items() if item is not None}


class ConfiguracoesStore:
    """
    Leitura com padrão e gravação por mesclagem.

    O padrão é gravado pelo bootstrap; a leitura nunca escreve e, se o
    registro não existir, devolve o mesmo padrão.
    """

    def __init__(self, db: Database):
        self.db = db

    async def obter_configuracoes(self) -> ConfiguracoesResponse:
        with traduzir_erros_banco("obter configurações"):
            async with self.db.sessao() as session:
                result = await session.execute(
                    select(Configuracao.value).where(Configuracao.key == CHAVE_CONFIGURACOES)
                )
                valor = result.scalar_one_or_none()
        return ConfiguracoesResponse(**{**configuracoes_padrao(), **_sem_nulos(valor)})

    async def salvar_configuracoes(self, dados: ConfiguracoesUpdate) -> ConfiguracoesResponse:
        """Mescla só os campos enviados no registro existente"""
        alteracoes = {}
        for campo in CONFIGURACOES_PADRAO:
            if campo not in dados.model_fields_set:
                continue
            valor = getattr(dados, campo)
            alteracoes[campo] = CONFIGURACOES_PADRAO[campo] if valor is None else valor
        alteracoes = copy.deepcopy(alteracoes)

        with traduzir_erros_banco("salvar configurações"):
            async with self.db.sessao() as session:
                async with session.begin():
                    dialeto = self.db.engine.dialect.name
                    await session.execute(
                        insert_ignorando_conflito(dialeto, Configuracao.__table__).values(
                            key=CHAVE_CONFIGURACOES,
                            value=configuracoes_padrao(),
                        )
                    )
                    result = await session.execute(
                        select(Configuracao)
                        .where(Configuracao.key == CHAVE_CONFIGURACOES)
                        .with_for_update()
                    )
                    registro = result.scalar_one()
                    registro.value = {**configuracoes_padrao(), **_sem_nulos(registro.value), **alteracoes}
                    valor = registro.value

        logger.info(f"Configurações salvas: campos={sorted(alteracoes)}")
        return ConfiguracoesResponse(**valor)
