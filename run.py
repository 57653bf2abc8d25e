import logging

import uvicorn

from seocrawl.api.server import create_app
from seocrawl.config import get_str_env
from seocrawl.container import Container
from seocrawl.db.engine import init_db

logger = logging.getLogger(__name__)


def main(container: Container = None):
    """Start the SEOCrawl API server.

    Args:
        container: Optional DI container. A default one is built when omitted,
            tests inject one with overridden providers.
    """
    logging.basicConfig(
        level=get_str_env("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if container is None:
        container = Container()

    init_db(container.db_engine())
    app = create_app(container)

    host = container.config.HOST() or "0.0.0.0"
    port = int(container.config.PORT() or 8000)
    logger.info("SEOCrawl API listening on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
