"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import JSONResponse

from fitness_coach.api.models import (
    ChatRequest,
    FitnessRecommendationsRequest,
    SimpleChatRequest,
)
from fitness_coach.app_logging import configure_logging
from fitness_coach.containers import AppContainer
from fitness_coach.domain.errors import ExternalServiceError, ProfileNotFoundError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    show_detail = container.settings.environment == "local"

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    router = APIRouter(prefix=container.settings.api_prefix)

    @app.exception_handler(ProfileNotFoundError)
    async def profile_not_found(
        request: Request, exc: ProfileNotFoundError
    ) -> JSONResponse:
        return _error(
            status.HTTP_404_NOT_FOUND,
            "User not found",
            str(exc) if show_detail else "The requested user does not exist.",
        )

    @app.exception_handler(ExternalServiceError)
    async def external_service_failed(
        request: Request, exc: ExternalServiceError
    ) -> JSONResponse:
        logger.error("%s failure on %s: %s", exc.service, request.url.path, exc)
        return _error(
            status.HTTP_502_BAD_GATEWAY,
            f"{exc.service} unavailable",
            str(exc) if show_detail else "An upstream service failed.",
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Request failed",
            str(exc) if show_detail else "An unexpected error occurred.",
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @router.post("/chat", response_model=None)
    async def chat(
        payload: ChatRequest, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Answer a chat message, personalised when a user id is given."""
        if not payload.message or not payload.message.strip():
            return _error(status.HTTP_400_BAD_REQUEST, "Message is required")
        state_container: AppContainer = request.app.state.container
        logger.info("Received chat message for user %s", payload.user_id or "-")
        response = await state_container.chat_service.chat(
            payload.message, payload.user_id or None
        )
        return {"response": response}

    @router.post("/fitness-recommendations", response_model=None)
    async def fitness_recommendations(
        payload: FitnessRecommendationsRequest, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Generate a weekly fitness and meal plan for a user."""
        if not payload.user_id or not payload.user_id.strip():
            return _error(status.HTTP_400_BAD_REQUEST, "User ID is required")
        state_container: AppContainer = request.app.state.container
        plan = await state_container.plan_service.fitness_recommendations(
            payload.user_id
        )
        if isinstance(plan, dict):
            return plan
        return {"response": plan}

    @router.post("/simple-chat", response_model=None)
    async def simple_chat(
        payload: SimpleChatRequest, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Answer a message with the minimal prompt."""
        if not payload.message or not payload.message.strip():
            return _error(status.HTTP_400_BAD_REQUEST, "Message is required")
        state_container: AppContainer = request.app.state.container
        response = await state_container.chat_service.simple_chat(payload.message)
        return {"response": response}

    app.include_router(router)
    return app


def _error(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    content = {"error": error, "message": message or error}
    return JSONResponse(status_code=status_code, content=content)
