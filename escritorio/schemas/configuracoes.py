"""
Schemas Pydantic para as configurações do escritório
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Optional


class ConfiguracoesResponse(BaseModel):
    logo_url: str = ""
    custom_menu_links: list[Any] = []

    model_config = ConfigDict(extra="allow")


class ConfiguracoesUpdate(BaseModel):
    """
    Atualização parcial das configurações

    Campo ausente fica como está, `null` volta ao padrão, valor substitui.
    """
    logo_url: Optional[str] = Field(None, max_length=2048, description="URL do logo do escritório")
    custom_menu_links: Optional[list[Any]] = Field(None, description="Links do menu personalizado")
