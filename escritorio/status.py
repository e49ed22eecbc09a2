"""
Regras de status do processo.

Uma movimentação com prazo fatal coloca o processo em "Pendente de
manifestação", qualquer que seja o status anterior. Sem prazo, o status não
muda. Fora isso o status só muda por alteração explícita; concluir a
movimentação do prazo não tira o processo da pendência.
"""
from datetime import date
from typing import Optional

from .exceptions import ValidationError

STATUS_INICIAL = "Distribuído"
STATUS_PENDENTE_MANIFESTACAO = "Pendente de manifestação"
STATUS_EM_EXECUCAO = "Em fase de execução"

# Opções oferecidas pelo front-end; o campo continua texto livre
STATUS_CONHECIDOS = (
    STATUS_INICIAL,
    "Em andamento",
    STATUS_PENDENTE_MANIFESTACAO,
    "Aguardando julgamento",
    "Em grau de recurso",
    STATUS_EM_EXECUCAO,
    "Suspenso",
    "Arquivado",
)


def status_apos_movimentacao(status_atual: Optional[str], prazo_fatal: Optional[date]) -> str:
    """Status resultante de incluir uma movimentação"""
    if prazo_fatal is not None:
        return STATUS_PENDENTE_MANIFESTACAO
    return status_atual or STATUS_INICIAL


def normalizar_status(status: Optional[str]) -> str:
    if status is None or not status.strip():
        raise ValidationError("Status é obrigatório", detalhes={"campo": "status"})
    return status.strip()
