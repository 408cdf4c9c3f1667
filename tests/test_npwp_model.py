"""
Tests dels models NPWPDatos / NPWPResponse
"""
import pytest
from pydantic import ValidationError
from npwp_agent.models.npwp_response import NPWPDatos, NPWPResponse
from npwp_agent.models.base_response import ValidationItem
from npwp_agent.utils.redact import redact_npwp, redact_request_info


def _datos(**overrides):
    fields = dict(
        npwp="01.234.567.8-901.234",
        digits="012345678901234",
        taxpayer_code="01",
        taxpayer_type="badan",
        serial="234567",
        check_digit="8",
        local_tax_office_code="901",
        branch_code="234",
        is_head_office=False,
    )
    fields.update(overrides)
    return NPWPDatos(**fields)


class TestNPWPDatos:
    def test_camps(self):
        d = _datos()
        assert d.taxpayer_code == "01"
        assert d.branch_code == "234"

    def test_taxpayer_type_opcional(self):
        assert _datos(taxpayer_type=None).taxpayer_type is None

    def test_camp_obligatori(self):
        with pytest.raises(ValidationError):
            NPWPDatos(npwp="01.234.567.8-901.234")


class TestValidationItem:
    def test_severity_invalid_raises(self):
        with pytest.raises(ValidationError):
            ValidationItem(code="X", severity="blocker", message="test")

    def test_optional_fields(self):
        item = ValidationItem(code="NPWP_ZERO_SERIAL", severity="critical", message="Test")
        assert item.field is None
        assert item.evidence is None
        assert item.suggested_fix is None


class TestNPWPResponse:
    def test_serialization_has_all_keys(self):
        r = NPWPResponse(status=200, message="OK", result=_datos())
        d = r.model_dump()
        assert set(d) == {"status", "message", "result", "metadata"}
        assert d["result"]["npwp"] == "01.234.567.8-901.234"

    def test_metadata_default_buit(self):
        a = NPWPResponse(status=400, message="not 15 digit")
        b = NPWPResponse(status=400, message="not 15 digit")
        a.metadata["x"] = 1
        assert b.metadata == {}
        assert a.result is None

    def test_status_literal(self):
        with pytest.raises(ValidationError):
            NPWPResponse(status=201, message="Created")

    def test_success(self):
        assert NPWPResponse(status=200, message="OK").success is True
        assert NPWPResponse(status=400, message="not 15 digit").success is False
        assert NPWPResponse(status=500, message="Internal error").success is False


class TestRedact:
    def test_redact_npwp(self):
        assert redact_npwp("01.234.567.8-901.234") == "01.2****4"
        assert redact_npwp("012345678901234") == "0123****4"

    def test_redact_curt(self):
        assert redact_npwp(None) == "***"
        assert redact_npwp("") == "***"
        assert redact_npwp("12") == "***"

    def test_redact_curt_no_revela_res(self):
        """Valors parcials curts no es mostren en clar"""
        assert redact_npwp("12345") == "***"
        assert redact_npwp("1.234") == "***"
        assert redact_npwp("123456") == "1234****6"

    def test_redact_request_info(self):
        info = redact_request_info("012345678901234", 200)
        assert info == {"npwp_redacted": "0123****4", "status": 200}
