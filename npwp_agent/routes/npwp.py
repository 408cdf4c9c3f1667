"""
Ruta per validar NPWP — envelope {status, message, result, metadata}
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel
from npwp_agent.config import settings
from npwp_agent.models.npwp_response import NPWPResponse
from npwp_agent.parsers.npwp_parser import npwp_parser
from npwp_agent.utils.redact import redact_request_info

log = logging.getLogger("npwp.route")


class NPWPRequest(BaseModel):
    npwp: Optional[str] = None


class NPWPBatchRequest(BaseModel):
    items: List[Optional[str]]


router = APIRouter()


def _process(value: Optional[str], response: Response) -> NPWPResponse:
    result = npwp_parser.validate_and_build_response(value)
    response.status_code = result.status
    log.info("npwp_validated", extra=redact_request_info(value, result.status))
    return result


@router.get("/npwp/{value}", response_model=NPWPResponse)
def get_npwp(value: str, response: Response):
    """
    Valida i descompon un NPWP passat al path.

    - **value**: NPWP en qualsevol format (amb punts, guions, espais o sense)
    """
    return _process(value, response)


@router.post("/npwp/validate", response_model=NPWPResponse)
def post_npwp(body: NPWPRequest, response: Response):
    """Valida i descompon un NPWP rebut com a JSON {"npwp": "..."}."""
    return _process(body.npwp, response)


@router.post("/npwp/batch", response_model=List[NPWPResponse])
def post_npwp_batch(body: NPWPBatchRequest):
    """
    Valida una llista d'NPWP. Sempre HTTP 200: cada element porta el seu status.
    """
    if len(body.items) > settings.max_batch_size:
        raise HTTPException(
            status_code=413,
            detail=f"Massa elements. Màxim {settings.max_batch_size}.",
        )

    results = [npwp_parser.validate_and_build_response(item) for item in body.items]
    log.info("npwp_batch_validated", extra={
        "items": len(results),
        "invalid": sum(1 for r in results if not r.success),
    })
    return results
