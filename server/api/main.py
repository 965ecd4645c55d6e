# FastAPI application

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from utils.logger import setup_logging
from utils import error_codes
from utils.response import create_error_response, error_json_response
from db.manager import DatabaseManager
from db.schema import create_tables
from api.dependencies import config
from api.middleware import setup_middleware

from api.trains import trains_router
from api.stations import stations_router
from api.menu import menu_router
from api.orders import orders_router
from api.drafts import drafts_router

setup_logging(config.config)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{config.config['app']['name']} starting")
    logger.info(f"Environment: {config.env}")
    logger.info(f"Debug: {config.config['app']['debug']}")

    db_path = config.get_database_config()['path']
    with DatabaseManager(db_path) as db:
        create_tables(db)
    logger.info(f"Database ready: {db_path}")

    yield

    logger.info(f"{config.config['app']['name']} shutting down")


app = FastAPI(
    title=config.config['app']['name'],
    version=config.config['app']['version'],
    description=config.config['app']['description'],
    debug=config.config['app']['debug'],
    lifespan=lifespan
)

setup_middleware(app, config.config)

app.include_router(trains_router)
app.include_router(stations_router)
app.include_router(menu_router)
app.include_router(orders_router)
app.include_router(drafts_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.status_code), message=str(exc.detail))
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed query / body parameters."""
    fields = []
    for error in exc.errors():
        location = [str(part) for part in error.get('loc', ()) if part not in ('body', 'query', 'path')]
        fields.append({'field': '.'.join(location), 'error': error.get('msg')})
    return error_json_response(error_codes.MISSING_PARAMS, meta={'fields': fields})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    return error_json_response(error_codes.SERVER_ERROR)


@app.get("/")
async def root():
    return {
        "message": f"{config.config['app']['name']} is running",
        "version": config.config['app']['version'],
        "status": "healthy"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": config.config['app']['version'],
        "environment": config.env
    }


@app.get("/api/info")
async def api_info():
    return {
        "name": config.config['app']['name'],
        "version": config.config['app']['version'],
        "description": config.config['app']['description'],
        "environment": config.env,
        "endpoints": {
            "trains": "/api/trains",
            "stations": "/api/stations",
            "menu": "/api/menu",
            "orders": "/api/orders",
            "drafts": "/api/drafts"
        }
    }


if __name__ == "__main__":
    import uvicorn

    server_config = config.config['server']

    uvicorn.run(
        "api.main:app",
        host=server_config.get('host', '127.0.0.1'),
        port=server_config.get('port', 8000),
        reload=server_config.get('reload', False),
        workers=1 if server_config.get('reload', False) else server_config.get('workers', 1),
        log_level="debug" if config.config['app']['debug'] else "info"
    )
