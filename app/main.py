import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from app.config.settings import get_settings
from app.api.v1.router import api_router
from app.services.errors import InvalidGroupId

settings = get_settings()
logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Gacha Eats draw engine", debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Answer malformed requests with the same ``{code, message}`` detail as domain errors."""
    errors = jsonable_encoder(exc.errors())
    logger.debug("rejected %s %s: %s", request.method, request.url.path, errors)

    fields = {str(error["loc"][-1]) for error in errors if error.get("loc")}
    message = InvalidGroupId.message if "group_id" in fields else "Request validation failed"
    return JSONResponse(
        status_code=422,
        content={"detail": {"code": InvalidGroupId.code, "message": message, "errors": errors}},
    )
