"""
Parser expert per NPWP (Nomor Pokok Wajib Pajak)

NPWP: 15 dígits amb format ST.sss.sss.C-OOO.BBB

  S     serial del tipus de contribuent (0-9)
  T     tipus de contribuent
  sss.sss  serial (blocs repartits per la DJP a cada KPP), comença a 1
  C     dígit de control (NO verificat)
  OOO   codi de l'oficina local (kode KPP)
  BBB   codi de sucursal, 000 = única / cap de família

Phase 1 — NPWP.validate():                  normalització + validació estructural
Phase 2 — validate_and_build_response():    envelope {status, message, result, metadata}
"""
import re
import logging
from enum import Enum
from typing import Optional

from npwp_agent.models.npwp_response import NPWPDatos, NPWPResponse
from npwp_agent.models.base_response import ValidationItem
from npwp_agent.utils.redact import redact_npwp

log = logging.getLogger("npwp.parser")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

NPWP_LENGTH = 15

# Sense codi de sucursal (BBB)
NPWP_SHORT_LENGTH = 12
DEFAULT_BRANCH_CODE = "000"

# "1.234..." → falta el primer dígit (S), s'assumeix 0
_MISSING_LEADING_DIGIT = re.compile(r"^[0-9]\.")
_NON_DIGITS = re.compile(r"[^0-9]+")

# Segon dígit (T) → tipus de contribuent
TAXPAYER_TYPES = {
    "0": "bendahara pemerintah",   # government treasury
    "1": "badan",                  # company / organization
    "2": "badan",
    "3": "badan",
    "4": "pengusaha perorangan",   # individual entrepreneur
    "5": "pegawai negeri",         # civil servant (PNS)
    "6": "pengusaha perorangan",
    "7": "pegawai perorangan",     # individual employee
    "8": "pegawai perorangan",
    "9": "pegawai perorangan",
}


class NPWPError(str, Enum):
    """Motius de rebuig estructural."""
    MALFORMED_LENGTH = "NPWP_MALFORMED_LENGTH"
    ZERO_SERIAL = "NPWP_ZERO_SERIAL"

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]

    @property
    def suggested_fix(self) -> str:
        return _SUGGESTED_FIXES[self]


_ERROR_MESSAGES = {
    NPWPError.MALFORMED_LENGTH: "not 15 digit",
    NPWPError.ZERO_SERIAL: "serial starts from 1, not 0",
}

_SUGGESTED_FIXES = {
    NPWPError.MALFORMED_LENGTH: "expected 15 digits ST.sss.sss.C-OOO.BBB, or 12 without the branch code",
    NPWPError.ZERO_SERIAL: "serial sss.sss must be 000.001 or higher",
}


class NPWPFormatError(ValueError):
    """Error intern de normalize_digits(). NPWP el converteix en bool + motiu."""

    def __init__(self, reason: NPWPError):
        super().__init__(reason.message)
        self.reason = reason


# ---------------------------------------------------------------------------
# Normalització
# ---------------------------------------------------------------------------

def normalize_digits(raw: str) -> str:
    """
    Text lliure → 15 dígits canònics.

    Accepta el format estricte i dues relaxacions:
      - primer dígit absent ("0.000.001.0-000.000") → prefix "0"
      - sucursal absent (12 dígits) → sufix "000"
    Qualsevol altra longitud es rebutja, no es talla ni s'omple.

    Raises:
        NPWPFormatError: MALFORMED_LENGTH o ZERO_SERIAL
    """
    s = raw.lstrip()
    if _MISSING_LEADING_DIGIT.match(s):
        s = "0" + s
    s = _NON_DIGITS.sub("", s)

    if len(s) == NPWP_SHORT_LENGTH:
        s += DEFAULT_BRANCH_CODE
    if len(s) != NPWP_LENGTH:
        raise NPWPFormatError(NPWPError.MALFORMED_LENGTH)

    if int(s[2:8]) < 1:
        raise NPWPFormatError(NPWPError.ZERO_SERIAL)

    return s


def format_digits(digits: str) -> str:
    """012345678901234 → 01.234.567.8-901.234"""
    return f"{digits[0:2]}.{digits[2:5]}.{digits[5:8]}.{digits[8:9]}-{digits[9:12]}.{digits[12:15]}"


# ---------------------------------------------------------------------------
# Value object
# ---------------------------------------------------------------------------

class NPWP:
    """
    NPWP parsejat a partir d'un text.

    La validació es fa un sol cop (lazy) i es guarda a la instància.
    La memòria cau no està sincronitzada: validar abans de compartir
    la instància entre fils.

        npwp = NPWP("01.234.567.8-901.234")
        if npwp.validate():
            npwp.taxpayer_code()   # "01", també kode_wajib_pajak() / kode_wp()
        else:
            npwp.errstr()          # "not 15 digit"
    """

    def __init__(self, raw: Optional[str]):
        self._raw = raw if raw is not None else ""
        self._digits: Optional[str] = None
        self._valid: Optional[bool] = None
        self._error: Optional[NPWPError] = None

    def __repr__(self) -> str:
        return f"NPWP({self._raw!r})"

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def digits(self) -> Optional[str]:
        """15 dígits canònics, o None si invàlid."""
        self.validate()
        return self._digits

    def validate(self, other: Optional[str] = None) -> bool:
        """
        True si l'NPWP és vàlid. Amb `other` valida aquell text
        sense tocar l'estat de la instància.
        """
        if other is not None:
            return validate_npwp(other)
        if self._valid is not None:
            return self._valid

        try:
            self._digits = normalize_digits(self._raw)
        except NPWPFormatError as e:
            self._error = e.reason
            self._valid = False
        else:
            self._valid = True
        return self._valid

    def error_reason(self) -> Optional[NPWPError]:
        """Motiu del rebuig, o None si és vàlid."""
        if self.validate():
            return None
        return self._error

    def errstr(self) -> Optional[str]:
        """Descripció textual del rebuig, o None si és vàlid."""
        reason = self.error_reason()
        return reason.message if reason else None

    def normalize(self, other: Optional[str] = None) -> Optional[str]:
        """Format ST.sss.sss.C-OOO.BBB, o None si invàlid."""
        if other is not None:
            return NPWP(other).normalize()
        if not self.validate():
            return None
        return format_digits(self._digits)

    pretty = normalize
    pretty_print = normalize

    # -- Components --------------------------------------------------------

    def _slice(self, start: int, end: int) -> Optional[str]:
        if not self.validate():
            return None
        return self._digits[start:end]

    def taxpayer_code(self) -> Optional[str]:
        """Codi de contribuent (2 dígits)."""
        return self._slice(0, 2)

    kode_wajib_pajak = taxpayer_code
    kode_wp = taxpayer_code

    def serial(self) -> Optional[str]:
        """Serial del contribuent (6 dígits)."""
        return self._slice(2, 8)

    nomor_urut = serial

    def check_digit(self) -> Optional[str]:
        """Dígit de control. S'extreu però no es verifica."""
        return self._slice(8, 9)

    def local_tax_office_code(self) -> Optional[str]:
        """Codi KPP (3 dígits)."""
        return self._slice(9, 12)

    kode_kpp = local_tax_office_code

    def branch_code(self) -> Optional[str]:
        """Codi de sucursal (3 dígits). 000 = única / cap de família."""
        return self._slice(12, 15)

    kode_cabang = branch_code

    def taxpayer_type(self) -> Optional[str]:
        code = self.taxpayer_code()
        if code is None:
            return None
        return TAXPAYER_TYPES[code[1]]

    def is_head_office(self) -> Optional[bool]:
        branch = self.branch_code()
        if branch is None:
            return None
        return branch == DEFAULT_BRANCH_CODE

    def to_datos(self) -> Optional[NPWPDatos]:
        if not self.validate():
            return None
        return NPWPDatos(
            npwp=self.normalize(),
            digits=self._digits,
            taxpayer_code=self.taxpayer_code(),
            taxpayer_type=self.taxpayer_type(),
            serial=self.serial(),
            check_digit=self.check_digit(),
            local_tax_office_code=self.local_tax_office_code(),
            branch_code=self.branch_code(),
            is_head_office=self.is_head_office(),
        )


# ---------------------------------------------------------------------------
# Funcions
# ---------------------------------------------------------------------------

def validate_npwp(value: Optional[str]) -> bool:
    """True si l'NPWP és vàlid. Per saber el motiu, usar NPWP(...).errstr()."""
    return NPWP(value).validate()


def normalize_npwp(value: Optional[str]) -> Optional[str]:
    return NPWP(value).normalize()


# ---------------------------------------------------------------------------
# Parser — Phase 2: envelope
# ---------------------------------------------------------------------------

class NPWPParser:

    @staticmethod
    def parse(text: Optional[str]) -> NPWP:
        """Phase 1: normalització + validació estructural"""
        npwp = NPWP(text)
        npwp.validate()
        return npwp

    @staticmethod
    def validate_and_build_response(text: Optional[str]) -> NPWPResponse:
        """Phase 2: {status, message, result, metadata}"""
        try:
            npwp = NPWPParser.parse(text)

            if npwp.validate():
                return NPWPResponse(status=200, message="OK", result=npwp.to_datos())

            reason = npwp.error_reason()
            error = ValidationItem(
                code=reason.value,
                severity="critical",
                field="npwp",
                message=reason.message,
                evidence=redact_npwp(npwp.raw),
                suggested_fix=reason.suggested_fix,
            )
            return NPWPResponse(
                status=400,
                message=reason.message,
                metadata={"errors": [error.model_dump()]},
            )
        except Exception:
            log.exception("npwp_unexpected_error", extra={"npwp_redacted": redact_npwp(text)})
            return NPWPResponse(status=500, message="Internal error")


# Singleton
npwp_parser = NPWPParser()
