"""
NPWP Agent - API FastAPI

Agent independent per validar NPWP (Nomor Pokok Wajib Pajak)
"""
import time
import logging
import json
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from npwp_agent.config import settings
from npwp_agent.routes import npwp


class _JsonFormatter(logging.Formatter):
    """Format JSON per logs estructurats (compatible amb Datadog, Loki, etc.)"""

    _RESERVED = set(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        # Afegir camps extra (mètriques, context)
        for key, val in record.__dict__.items():
            if key not in self._RESERVED and not key.startswith("_"):
                payload[key] = val
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _configure_logging() -> None:
    root = logging.getLogger("npwp")
    if any(isinstance(h.formatter, _JsonFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.setLevel("DEBUG" if settings.debug else settings.log_level.upper())
    root.addHandler(handler)
    root.propagate = False


_configure_logging()
log = logging.getLogger("npwp.request")

# Crear app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Agent de validació d'NPWP (número fiscal indonesi)",
    docs_url="/docs",
    redoc_url="/redoc"
)


# Middleware de latència i logging de peticions
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Registra mètrica de latència per a cada petició."""
    t0 = time.monotonic()
    response = await call_next(request)
    durada_ms = round((time.monotonic() - t0) * 1000)
    log.info(
        "http_request",
        extra={
            "method": request.method,
            "status_code": response.status_code,
            "durada_ms": durada_ms,
        }
    )
    return response


# Middleware de validació d'API Key
@app.middleware("http")
async def validate_api_key(request: Request, call_next):
    """
    Valida l'API key en cada petició (excepte endpoints públics)
    """
    public_paths = ["/", "/health"]

    if request.url.path in public_paths:
        return await call_next(request)

    if not settings.api_key_enabled:
        return await call_next(request)

    if not settings.api_key:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "API key no configurada al servidor"}
        )

    api_key = request.headers.get("X-API-Key")

    if not api_key or api_key != settings.api_key:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "API key invàlida o no proporcionada"},
            headers={"WWW-Authenticate": "ApiKey"}
        )

    return await call_next(request)


# Routes
app.include_router(npwp.router, tags=["NPWP"])


@app.get("/")
async def root():
    """Root endpoint - retorna només estat bàsic"""
    return {"status": "ok"}


@app.get("/health")
async def health():
    """Endpoint de health check"""
    return {"status": "healthy", "version": settings.app_version}
