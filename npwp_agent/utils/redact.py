"""
Utilitats de redacció per a logs

L'NPWP identifica una persona: no ha d'aparèixer en clar als logs.
"""
from typing import Optional

# Per sota d'aquesta longitud, prefix + sufix revelarien tot el valor
_MIN_REDACT_LENGTH = 6


def redact_npwp(npwp: Optional[str]) -> str:
    """
    Redacta un NPWP per a logs.
    "01.234.567.8-901.234" → "01.2****4"
    "012345678901234"      → "0123****4"
    "12345"                → "***"
    """
    if not npwp or len(npwp) < _MIN_REDACT_LENGTH:
        return "***"
    return npwp[:4] + "****" + npwp[-1]


def redact_request_info(npwp: Optional[str], status: Optional[int]) -> dict:
    """
    Retorna un dict segur per a logging: dades tècniques sense PII.
    """
    return {
        "npwp_redacted": redact_npwp(npwp),
        "status": status,
    }
