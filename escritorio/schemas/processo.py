"""
Schemas Pydantic para processos, movimentações e links
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import date, datetime
from typing import Any, Optional


def _vazio_para_none(v: Any) -> Any:
    # O front-end envia "" para datas não preenchidas
    if isinstance(v, str) and not v.strip():
        return None
    return v


class ProcessoCreate(BaseModel):
    """Schema para criação de processo"""
    numero: Optional[str] = Field(
        None,
        max_length=255,
        description="Número do processo",
        examples=["0001234-56.2024.8.26.0100"]
    )
    cliente: Optional[str] = Field(
        None,
        max_length=255,
        description="Nome do cliente",
        examples=["Acme Ltda"]
    )
    tribunal: Optional[str] = Field(None, max_length=255, examples=["TJSP"])
    vara: Optional[str] = Field(None, max_length=255, examples=["2ª Vara Cível"])
    area_direito: Optional[str] = Field(None, max_length=255, examples=["Cível"])
    proxima_audiencia: Optional[date] = Field(None, description="Data da próxima audiência")
    modo_audiencia: Optional[str] = Field(None, max_length=50, examples=["virtual"])
    link_audiencia: Optional[str] = Field(None, max_length=1024)

    @field_validator('proxima_audiencia', mode='before')
    @classmethod
    def data_vazia(cls, v):
        return _vazio_para_none(v)


class ProcessoUpdate(ProcessoCreate):
    """
    Schema para atualização dos campos do processo

    Só os campos enviados são alterados; `null` explícito limpa um campo
    opcional.
    """
    pass


class FiltroProcessos(BaseModel):
    """Filtros da listagem de processos"""
    tribunal: Optional[list[str]] = Field(None, description="Um ou mais tribunais (IN)")
    vara: Optional[str] = Field(None, description="Trecho do nome da vara")
    search: Optional[str] = Field(None, description="Trecho do número ou do cliente")

    @field_validator('tribunal', mode='before')
    @classmethod
    def tribunal_como_lista(cls, v):
        if isinstance(v, str):
            return [v]
        return v


class StatusUpdate(BaseModel):
    status: Optional[str] = Field(None, max_length=255, examples=["Em fase de execução"])


class MovimentacaoCreate(BaseModel):
    descricao: Optional[str] = Field(None, description="Descrição da movimentação")
    prazo_fatal: Optional[date] = Field(None, description="Prazo fatal para manifestação")

    @field_validator('prazo_fatal', mode='before')
    @classmethod
    def prazo_vazio(cls, v):
        return _vazio_para_none(v)


class MovimentacaoUpdate(BaseModel):
    descricao: Optional[str] = None
    concluido: Optional[bool] = None


class LinkCreate(BaseModel):
    url: Optional[str] = Field(None, max_length=2048)
    descricao: Optional[str] = Field(None, max_length=255)


class MovimentacaoResponse(BaseModel):
    id: int
    descricao: str
    timestamp: datetime
    prazo_fatal: Optional[date] = None
    concluido: bool = False

    @field_validator('prazo_fatal', mode='before')
    @classmethod
    def prazo_vazio(cls, v):
        return _vazio_para_none(v)

    @field_validator('concluido', mode='before')
    @classmethod
    def concluido_padrao(cls, v):
        return bool(v)


class LinkResponse(BaseModel):
    id: int
    url: str
    descricao: str


class ProcessoResponse(BaseModel):
    id: int
    numero: str
    cliente: str
    status: str
    tribunal: Optional[str] = None
    vara: Optional[str] = None
    area_direito: Optional[str] = None
    proxima_audiencia: Optional[date] = None
    modo_audiencia: Optional[str] = None
    link_audiencia: Optional[str] = None
    movimentacoes: list[MovimentacaoResponse] = []
    links: list[LinkResponse] = []
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator('movimentacoes', 'links', mode='before')
    @classmethod
    def lista_nula(cls, v):
        return v or []
