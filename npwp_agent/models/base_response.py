"""
Contracte de resposta (envelope)

Tots els endpoints retornen aquest format:
{
  "status": 200 | 400 | 500,
  "message": "OK" | "<motiu>",
  "result": { <document-specific> } | null,
  "metadata": { ... }
}

Regles:
  status 200  → vàlid, message "OK", result amb els camps
  status 400  → error del client (NPWP invàlid), result null
  status 500  → error intern, result null
"""
from pydantic import BaseModel
from typing import Any, Optional, Literal


class ValidationItem(BaseModel):
    """Ítem normalitzat d'error o alerta."""
    code: str                                          # p.ex. "NPWP_ZERO_SERIAL"
    severity: Literal["warning", "error", "critical"]
    field: Optional[str] = None                        # camp afectat
    message: str                                       # text llegible
    evidence: Optional[str] = None                     # valor llegit (redactat)
    suggested_fix: Optional[str] = None                # recomanació


class Envelope(BaseModel):
    """Envelope base {status, message, result, metadata}."""
    status: Literal[200, 400, 500]
    message: str
    result: Optional[Any] = None
    metadata: dict = {}

    @property
    def success(self) -> bool:
        return self.status == 200
