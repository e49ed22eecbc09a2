"""Testes da store de configurações (leitura com padrão e mesclagem)."""

from sqlalchemy import delete, select, update

from escritorio.models import CHAVE_CONFIGURACOES, Configuracao
from escritorio.schemas import ConfiguracoesUpdate

MENU = [{"label": "Tribunal", "url": "https://esaj.tjsp.jus.br"}]


async def test_leitura_antes_de_gravar_devolve_padrao(configuracoes):
    lidas = await configuracoes.obter_configuracoes()

    assert lidas.logo_url == ""
    assert lidas.custom_menu_links == []


async def test_gravacoes_parciais_sao_mescladas(configuracoes):
    await configuracoes.salvar_configuracoes(ConfiguracoesUpdate(logo_url="x"))
    await configuracoes.salvar_configuracoes(ConfiguracoesUpdate(custom_menu_links=MENU))

    lidas = await configuracoes.obter_configuracoes()
    assert lidas.logo_url == "x"
    assert lidas.custom_menu_links == MENU


async def test_null_explicito_volta_ao_padrao(configuracoes):
    await configuracoes.salvar_configuracoes(ConfiguracoesUpdate(logo_url="x", custom_menu_links=MENU))

    salvas = await configuracoes.salvar_configuracoes(ConfiguracoesUpdate(logo_url=None))

    assert salvas.logo_url == ""
    assert salvas.custom_menu_links == MENU


async def test_gravar_sem_campos_nao_altera(configuracoes):
    await configuracoes.salvar_configuracoes(ConfiguracoesUpdate(logo_url="x"))

    salvas = await configuracoes.salvar_configuracoes(ConfiguracoesUpdate())

    assert salvas.logo_url == "x"


async def test_primeira_gravacao_cria_o_registro(db, configuracoes):
    async with db.sessao() as session:
        async with session.begin():
            await session.execute(delete(Configuracao))

    assert (await configuracoes.obter_configuracoes()).logo_url == ""

    await configuracoes.salvar_configuracoes(ConfiguracoesUpdate(logo_url="https://cdn/logo.png"))

    lidas = await configuracoes.obter_configuracoes()
    assert lidas.logo_url == "https://cdn/logo.png"
    assert lidas.custom_menu_links == []


async def test_campos_nulos_gravados_por_versoes_antigas_usam_o_padrao(db, configuracoes):
    async with db.sessao() as session:
        async with session.begin():
            await session.execute(
                update(Configuracao)
                .where(Configuracao.key == CHAVE_CONFIGURACOES)
                .values(value={"logo_url": None, "custom_menu_links": MENU})
            )

    lidas = await configuracoes.obter_configuracoes()
    assert lidas.logo_url == ""
    assert lidas.custom_menu_links == MENU

    salvas = await configuracoes.salvar_configuracoes(ConfiguracoesUpdate(custom_menu_links=[]))
    assert salvas.logo_url == ""
    assert salvas.custom_menu_links == []

    async with db.sessao() as session:
        gravado = (await session.execute(
            select(Configuracao.value).where(Configuracao.key == CHAVE_CONFIGURACOES)
        )).scalar_one()
    assert gravado == {"logo_url": "", "custom_menu_links": []}
