# CORS configuration

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typing import Dict, Any

LOCAL_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def setup_cors_middleware(app: FastAPI, config: Dict[str, Any]):
    """
    Args:
        app: FastAPI application
        config: configuration dictionary
    """
    cors_config = config.get('cors', {})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_config.get('allowed_origins', LOCAL_ORIGINS),
        allow_credentials=cors_config.get('allow_credentials', False),
        allow_methods=cors_config.get('allowed_methods', ["GET", "POST", "PUT", "PATCH", "DELETE"]),
        allow_headers=cors_config.get('allowed_headers', ["*"]),
    )
