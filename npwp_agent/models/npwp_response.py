"""
Models per la resposta de validació d'NPWP.
"""

from pydantic import BaseModel
from typing import Optional
from npwp_agent.models.base_response import Envelope


class NPWPDatos(BaseModel):
    """Components d'un NPWP vàlid"""

    npwp: str                                     # "01.234.567.8-901.234"
    digits: str                                   # "012345678901234"

    taxpayer_code: str                            # "01" (kode wajib pajak)
    taxpayer_type: Optional[str] = None           # "bendahara pemerintah", "badan", ...
    serial: str                                   # "234567" (nomor urut)
    check_digit: str                              # "8", no verificat
    local_tax_office_code: str                    # "901" (kode KPP)
    branch_code: str                              # "234" (kode cabang)
    is_head_office: bool                          # branch_code == "000"


class NPWPResponse(Envelope):
    """Resposta endpoint /npwp"""
    result: Optional[NPWPDatos] = None
