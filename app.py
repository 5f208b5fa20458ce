"""HTTP application - Wasfa Recipe Discovery Service.

Single entry point for the HTTP API:
- POST /api/recipes         recipes for an ingredient list (cached)
- GET  /api/recipes/search  recipes for a dish name
- GET  /api/substitutes     static ingredient substitutes
- GET  /api/pairings        ingredient pairing suggestions
- GET  /health              liveness plus which integrations are configured

Every response carries an X-Request-ID header (taken from the request when
the client sends one) and the access log line for it is tagged with the same id.

Run with: python app.py
"""

import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from wasfa.pipeline.recipes import RecipePipeline, initialize_recipe_pipeline
from wasfa.services.substitutions import ARABIC_LETTERS
from wasfa.utils.config import config
from wasfa.utils.logger import logger


INVALID_INGREDIENTS_MESSAGE = "Invalid ingredients. Please provide an array of ingredients."
INVALID_INGREDIENT_MESSAGE = "Invalid ingredient. Please provide an ingredient name."
INVALID_QUERY_MESSAGE = "Query must be at least 2 characters long."
NO_RECIPES_MESSAGE_AR = "لم نتمكن من إيجاد وصفات مناسبة للمكونات المدخلة. حاول إضافة المزيد من المكونات الأساسية."
NO_RECIPES_MESSAGE_EN = "We could not find suitable recipes for these ingredients. Try adding more basic ingredients."
NO_SEARCH_RESULTS_MESSAGE_AR = "لم نجد وصفات بهذا الاسم. جرّب اسمًا آخر أو ابحث بالمكونات المتوفرة لديك."
NO_SEARCH_RESULTS_MESSAGE_EN = "We could not find recipes with this name. Try another name or search by ingredients."

REQUEST_ID_HEADER = "X-Request-ID"


def _validation_details(error: ValidationError) -> list[str]:
    return [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()]


def _bad_request(message: str, error: Optional[ValidationError] = None) -> JSONResponse:
    content: dict = {"message": message}
    if error is not None:
        content["details"] = _validation_details(error)
    return JSONResponse(status_code=400, content=content)


def _is_arabic(texts: list) -> bool:
    return any(isinstance(text, str) and ARABIC_LETTERS.search(text) for text in texts)


def _no_recipes_message(ingredients: list) -> str:
    return NO_RECIPES_MESSAGE_AR if _is_arabic(ingredients) else NO_RECIPES_MESSAGE_EN


def _request_id(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if incoming and len(incoming) <= 64:
        return incoming
    return uuid.uuid4().hex


def create_app(pipeline: Optional[RecipePipeline] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        pipeline: Pipeline to serve. When None, one is built from configuration
            at startup and closed at shutdown.

    Returns:
        FastAPI: Configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.pipeline is None
        if owned:
            app.state.pipeline = initialize_recipe_pipeline()
        yield
        if owned:
            app.state.pipeline.close()
            app.state.pipeline = None

    app = FastAPI(title="Wasfa Recipe Discovery API", lifespan=lifespan)
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.middleware("http")
    async def tag_request(request: Request, call_next):
        request_id = _request_id(request)
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={"request_id": request_id},
        )
        return response

    @app.post("/api/recipes")
    async def find_recipes(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError:
            return _bad_request(INVALID_INGREDIENTS_MESSAGE)

        ingredients = body.get("ingredients") if isinstance(body, dict) else None
        try:
            result = await request.app.state.pipeline.find_recipes(ingredients)
        except ValidationError as e:
            logger.info(
                f"Rejected recipe request: {e.error_count()} validation error(s)",
                extra={"request_id": request.state.request_id},
            )
            return _bad_request(INVALID_INGREDIENTS_MESSAGE, e)

        content = result.to_wire()
        if not result.recipes:
            content["message"] = _no_recipes_message(ingredients)
        return JSONResponse(content=content)

    @app.get("/api/recipes/search")
    async def search_recipes(request: Request, query: Optional[str] = None) -> JSONResponse:
        try:
            result = await request.app.state.pipeline.search_recipes(query)
        except ValidationError as e:
            return _bad_request(INVALID_QUERY_MESSAGE, e)

        content = result.to_wire()
        if not result.recipes:
            content["message"] = NO_SEARCH_RESULTS_MESSAGE_AR if _is_arabic([query]) else NO_SEARCH_RESULTS_MESSAGE_EN
        return JSONResponse(content=content)

    @app.get("/api/substitutes")
    async def find_substitutes(request: Request, ingredient: Optional[str] = None) -> JSONResponse:
        try:
            result = await request.app.state.pipeline.find_substitutes(ingredient)
        except ValidationError as e:
            return _bad_request(INVALID_INGREDIENT_MESSAGE, e)
        return JSONResponse(content=result.to_wire())

    @app.get("/api/pairings")
    async def suggest_pairings(request: Request, ingredient: Optional[str] = None) -> JSONResponse:
        try:
            result = await request.app.state.pipeline.suggest_pairings(ingredient)
        except ValidationError as e:
            return _bad_request(INVALID_INGREDIENT_MESSAGE, e)
        return JSONResponse(content=result.to_wire())

    @app.get("/health")
    async def health(request: Request) -> dict:
        current: RecipePipeline = request.app.state.pipeline
        return {
            "status": "ok",
            "ai": current.generator.client.available,
            "video": current.enricher.searcher.available,
            "cache": current.cache is not None,
        }

    return app


app = create_app()


if __name__ == "__main__":
    logger.info(f"Starting Wasfa API on port {config.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
