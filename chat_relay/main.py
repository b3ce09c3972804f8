import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chat_relay.config import Settings, get_settings
from chat_relay.exceptions import ChatRelayError
from chat_relay.logging_config import setup_logging
from chat_relay.middleware.logging_middleware import RequestLoggingMiddleware
from chat_relay.repositories.chat_user_repository import ChatUserRepository
from chat_relay.repositories.conversation_repository import ConversationRepository
from chat_relay.repositories.json_file import JsonDocumentFile
from chat_relay.routers.chat import router as chat_router
from chat_relay.routers.health import router as health_router
from chat_relay.services.roster_gateway import RosterGateway


logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_file)

        conversation_repo = ConversationRepository(JsonDocumentFile(settings.messages_path), history_limit=settings.history_limit)
        chat_user_repo = ChatUserRepository(JsonDocumentFile(settings.chat_users_path))
        await conversation_repo.open_or_initialize()
        await chat_user_repo.open_or_initialize()
        roster_gateway = RosterGateway(settings.roster_base_url, timeout_s=settings.roster_timeout_seconds)

        app.state.settings = settings
        app.state.conversation_repo = conversation_repo
        app.state.chat_user_repo = chat_user_repo
        app.state.roster_gateway = roster_gateway
        logger.info("Chat server initialized on port %s", settings.port)
        try:
            yield
        finally:
            await roster_gateway.aclose()
            logger.info("Chat server shutting down")

    app = FastAPI(title="Tournament Chat Relay", lifespan=lifespan)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ChatRelayError)
    async def chat_relay_error_handler(request: Request, exc: ChatRelayError):
        if exc.http_status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.http_status, content={"error": exc.message, "code": exc.code})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request body", "code": "VALIDATION_ERROR"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error", "code": "INTERNAL_ERROR"})

    app.include_router(chat_router)
    app.include_router(health_router)
    return app


app = create_app()
