"""NoteChain API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map NoteChainError → structured JSON responses
    - One NoteLedger and one NoteStore per app instance, built in the lifespan
    - CORS configured from settings (not hardcoded)

Design Decisions:
    - create_app() factory: tests build isolated apps and seed app.state directly
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - The chain is in-memory and starts empty on every boot; export/import is the
      backup path
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notechain.api.error_handlers import register_error_handlers
from notechain.api.routes import chain, health, notes
from notechain.config import Settings, get_settings
from notechain.core.chain import Chain
from notechain.core.cipher_codec import CipherCodec
from notechain.infrastructure.database import init_db
from notechain.infrastructure.key_value_store import SqlKeyValueStore
from notechain.infrastructure.observability import setup_logging
from notechain.services.note_ledger import NoteLedger
from notechain.services.note_store import NoteStore

logger = logging.getLogger(__name__)


def build_ledger(settings: Settings) -> NoteLedger:
    codec = CipherCodec.from_secret(
        settings.cipher_secret,
        settings.cipher_salt,
        settings.cipher_kdf_iterations,
    )
    return NoteLedger(
        codec,
        Chain(
            digest=codec.digest,
            difficulty=settings.chain_difficulty,
            max_iterations=settings.mining_max_iterations,
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(settings.database_url)
    await manager.create_tables()
    ledger = build_ledger(settings)
    app.state.ledger = ledger
    app.state.note_store = NoteStore(SqlKeyValueStore(manager), ledger.codec)
    logger.info("NoteChain API started")
    yield
    await manager.dispose()
    logger.info("NoteChain API shutting down")


def create_app() -> FastAPI:
    app = FastAPI(title="NoteChain API", version="1.0.0", lifespan=lifespan)

    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(notes.router)
    app.include_router(chain.router)

    register_error_handlers(app)
    return app


app = create_app()
