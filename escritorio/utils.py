from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo


def parse_timestamp(valor: Any) -> Optional[datetime]:
    """
    Converte o timestamp gravado numa movimentação para datetime com fuso.

    Aceita o formato ISO gravado pela API e o formato com sufixo "Z" dos
    registros antigos; valores sem fuso são tratados como UTC.
    """
    if valor is None or valor == "":
        return None
    if isinstance(valor, datetime):
        momento = valor
    else:
        texto = str(valor).strip()
        if texto.endswith("Z"):
            texto = texto[:-1] + "+00:00"
        momento = datetime.fromisoformat(texto)
    if momento.tzinfo is None:
        momento = momento.replace(tzinfo=timezone.utc)
    return momento


def parse_data(valor: Any) -> Optional[date]:
    """Converte prazo/data gravado como texto ISO (com ou sem hora) para date"""
    if valor is None or valor == "":
        return None
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    return date.fromisoformat(str(valor).strip()[:10])


def inicio_da_semana(agora: datetime, fuso: str) -> datetime:
    """Segunda-feira mais recente à meia-noite no fuso informado"""
    zona = ZoneInfo(fuso)
    if agora.tzinfo is None:
        agora = agora.replace(tzinfo=timezone.utc)
    local = agora.astimezone(zona)
    segunda = local.date() - timedelta(days=local.weekday())
    return datetime.combine(segunda, time.min, tzinfo=zona)


def texto_opcional(valor: Optional[str]) -> Optional[str]:
    if valor is None:
        return None
    valor = valor.strip()
    return valor or None
