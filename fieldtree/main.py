from contextlib import asynccontextmanager

from fastapi import FastAPI

from fieldtree import __version__
from fieldtree.boundaries import ValidationOutcome, validated
from fieldtree.core.config import get_settings
from fieldtree.core.errors import register_error_handlers
from fieldtree.core.logging import configure_logging, get_logger
from fieldtree.core.middleware import RequestLoggingMiddleware
from fieldtree.engine import Engine, get_engine

log = get_logger(__name__)

SIGNUP = {
    "keys": {
        "first_name": {
            "validatorSchemes": [["name"]],
            "sanitizations": [["trim"]],
        },
        "password": {
            "validatorSchemes": [["password"]],
        },
        "dob": {
            "optional": True,
            "validators": [["isDate"]],
        },
        "newsletter": {
            "optional": True,
            "validatorSchemes": [["boolean"]],
            "sanitizations": [["toInt"]],
        },
        "contact": {
            "keys": {
                "email": {"validators": [["isEmail"]], "sanitizations": [["trim"]]},
                "phone": {"allowEmpty": True, "validators": [["isNumber"]]},
            },
            "validators": [["validMin", [1]]],
        },
    },
}


def create_app(engine: Engine | None = None) -> FastAPI:
    """Build the demonstration service."""
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_logs=settings.json_logs)
    engine = engine or get_engine()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("startup", message="fieldtree demo starting up")
        yield
        log.info("shutdown", message="fieldtree demo shutting down")

    app = FastAPI(
        title="fieldtree",
        description="Declarative field validation and sanitization",
        version=__version__,
        lifespan=lifespan,
    )

    register_error_handlers(app)
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": __version__}

    @app.post("/signup")
    async def signup(outcome: ValidationOutcome = validated(SIGNUP, "body", engine=engine)):
        return {"accepted": outcome.values}

    @app.get("/signup/preview")
    async def preview(outcome: ValidationOutcome = validated(SIGNUP, "query", throw_on_error=False, engine=engine)):
        return {"valid": outcome.valid, "errors": outcome.errors, "values": outcome.values}

    return app
