import importlib

MODULES = [
    'seocrawl.db.engine',
    'seocrawl.db.models',
    'seocrawl.repository.pages',
    'seocrawl.repository.sessions',
    'seocrawl.services.crawl_orchestrator',
    'seocrawl.services.headless_browser_renderer',
    'seocrawl.api.server',
]

def test_imports():
    for m in MODULES:
        importlib.import_module(m)
