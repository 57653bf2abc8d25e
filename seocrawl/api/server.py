from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from seocrawl import __version__
from seocrawl.api.routers import create_crawls_router, create_pages_router, create_systems_router


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed request bodies are reported like any other invalid crawl input.
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


def create_app(container) -> FastAPI:
    """Build the FastAPI application from the providers of `container`."""
    app = FastAPI(title="SEOCrawl", version=__version__)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.include_router(
        create_crawls_router(
            container.crawl_orchestrator,
            container.sessions_repository(),
            container.pages_repository(),
        )
    )
    app.include_router(create_pages_router(container.pages_repository()))
    app.include_router(create_systems_router(container.config()))
    return app
