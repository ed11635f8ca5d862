"""
Main application factory for filestore
"""

import argparse
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional, Union

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import setup_api_routes
from .config import DEFAULT_CONFIG_PATH, load_config
from .middleware import setup_middleware
from .models import Config
from .storage import FileStore

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FILESTORE_CONFIG"
ROOT_ENV_VAR = "FILESTORE_ROOT"


def setup_logging(config: Config):
    """Setup logging configuration"""
    log_config = config.logging

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_config.level.upper(), logging.INFO))
    root_logger.handlers.clear()

    if log_config.json:
        formatter = logging.Formatter(
            '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","msg":"%(message)s"}'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_config.file:
        log_file = Path(log_config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=log_config.max_size_mb * 1024 * 1024,
            backupCount=log_config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def resolve_storage_root(config: Config) -> Path:
    """Storage root from config; relative paths hang off the working directory"""
    root = Path(config.storage.root)
    if not root.is_absolute():
        root = Path(os.getcwd()) / root
    return root


def create_app(
    config_path: Optional[str] = None,
    storage_root: Optional[Union[str, Path]] = None,
) -> FastAPI:
    """Create FastAPI application"""

    if not config_path:
        config_path = os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)
    config = load_config(config_path)

    setup_logging(config)

    if storage_root is None:
        storage_root = os.getenv(ROOT_ENV_VAR) or resolve_storage_root(config)
    store = FileStore(storage_root)
    store.ensure_root()

    app = FastAPI(
        title="filestore",
        description="Network-accessible file store",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.config = config
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_middleware(app)
    setup_api_routes(app)

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"filestore starting on {config.server.addr}:{config.server.port}")
        logger.info(f"Storage root: {store.root}")

    return app


def main():
    """Main entry point for running the server"""

    parser = argparse.ArgumentParser(description="filestore HTTP file store")
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Configuration file path")
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    parser.add_argument("--root", default=None, help="Storage root directory")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    # The factory is re-imported by uvicorn, so settings travel through the environment
    os.environ[CONFIG_ENV_VAR] = args.config
    if args.root:
        os.environ[ROOT_ENV_VAR] = str(Path(args.root).resolve())

    config = load_config(args.config)
    host = args.host or config.server.addr
    port = args.port or config.server.port

    uvicorn.run(
        "filestore.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        access_log=False,  # AccessLogMiddleware logs requests
    )


if __name__ == "__main__":
    main()
