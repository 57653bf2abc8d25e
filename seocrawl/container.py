"""Dependency injection container for the application."""
from dependency_injector import containers, providers
from sqlalchemy.orm import sessionmaker

from seocrawl import config as env
from seocrawl.db.engine import make_engine
from seocrawl.repository.pages import PagesRepository
from seocrawl.repository.sessions import SessionsRepository
from seocrawl.services.content_optimizer import DEFAULT_API_URL, make_content_optimizer
from seocrawl.services.crawl_orchestrator import CrawlOrchestrator
from seocrawl.services.headless_browser_renderer import PlaywrightPageRenderer, PlaywrightRenderOptions


# Environment variables used by the container (read via `seocrawl.config` helpers).
#
# DATABASE_URL (str | optional)
#   SQLAlchemy connection string (PostgreSQL in production, SQLite works for
#   local runs). `make_engine()` raises if it is unset.
#
# USER_AGENT (str, default: "SEOCrawl/0.1")
#   User-Agent of the headless browser.
#
# RENDER_TIMEOUT_MS (int ms, default: 30000)
#   Navigation timeout per page; on expiry the page counts as a render failure.
#
# RENDER_WAIT_UNTIL (str, default: "networkidle")
#   Playwright load state to wait for: domcontentloaded | load | networkidle.
#
# DEFAULT_MAX_PAGES (int, default: 10)
#   Page budget used when a crawl request does not supply maxPages.
#
# OPTIMIZER_API_KEY (str | optional, falls back to OPENROUTER_API_KEY)
#   Without a key the optimizer is disabled and pages keep their raw markup.
#
# OPTIMIZER_API_URL (str, default: OpenRouter chat completions endpoint)
# OPTIMIZER_MODEL (str, default: "gpt-4o-mini")
# OPTIMIZER_TIMEOUT (float seconds, default: 60)
#
# HOST / PORT (default: 0.0.0.0 / 8000)
#   Bind address of the API server started by run.py.
ENV = {
    "DATABASE_URL": env.get_optional_str_env("DATABASE_URL"),
    "USER_AGENT": env.get_str_env("USER_AGENT", "SEOCrawl/0.1"),
    "RENDER_TIMEOUT_MS": env.get_int_env("RENDER_TIMEOUT_MS", 30_000),
    "RENDER_WAIT_UNTIL": env.get_str_env("RENDER_WAIT_UNTIL", "networkidle").strip().lower(),
    "DEFAULT_MAX_PAGES": env.get_int_env("DEFAULT_MAX_PAGES", 10),
    "OPTIMIZER_API_KEY": env.optimizer_api_key(),
    "OPTIMIZER_API_URL": env.get_str_env("OPTIMIZER_API_URL", DEFAULT_API_URL),
    "OPTIMIZER_MODEL": env.get_str_env("OPTIMIZER_MODEL", "gpt-4o-mini"),
    "OPTIMIZER_TIMEOUT": env.get_float_env("OPTIMIZER_TIMEOUT", 60.0),
    "HOST": env.get_str_env("HOST", "0.0.0.0"),
    "PORT": env.get_int_env("PORT", 8000),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for SEOCrawl application."""

    # Configuration
    config = providers.Configuration(default=ENV)

    # Database engine - Singleton to reuse connection pool
    db_engine = providers.Singleton(
        make_engine,
        database_url=config.DATABASE_URL
    )
    # Session factory bound to the engine
    session_factory = providers.Singleton(
        sessionmaker,
        bind=db_engine,
        future=True,
        expire_on_commit=False,
    )

    # Repositories - Singleton instances
    sessions_repository = providers.Singleton(
        SessionsRepository,
        session_factory=session_factory
    )

    pages_repository = providers.Singleton(
        PagesRepository,
        session_factory=session_factory
    )

    # One renderer (and browser) per crawl
    page_renderer = providers.Factory(
        PlaywrightPageRenderer,
        user_agent=config.USER_AGENT.as_(str),
        options=providers.Factory(
            PlaywrightRenderOptions,
            timeout_ms=config.RENDER_TIMEOUT_MS.as_(int),
            wait_until=config.RENDER_WAIT_UNTIL.as_(str),
        ),
    )

    content_optimizer = providers.Singleton(
        make_content_optimizer,
        api_key=config.OPTIMIZER_API_KEY,
        api_url=config.OPTIMIZER_API_URL.as_(str),
        model=config.OPTIMIZER_MODEL.as_(str),
        timeout=config.OPTIMIZER_TIMEOUT.as_(float),
    )

    crawl_orchestrator = providers.Factory(
        CrawlOrchestrator,
        renderer_factory=page_renderer.provider,
        optimizer=content_optimizer,
        sessions_repo=sessions_repository,
        pages_repo=pages_repository,
        default_max_pages=config.DEFAULT_MAX_PAGES.as_(int),
        render_timeout_ms=config.RENDER_TIMEOUT_MS.as_(int),
    )
