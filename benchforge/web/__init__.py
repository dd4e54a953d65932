from .browser import start_browser
from .server import DashboardServer, ServerError, make_server, serve, start_server
from .stream import ResultStream, StreamClosed
from .template import DashboardTemplate, TemplateLoadError, load_template

__all__ = [
    "start_server",
    "make_server",
    "serve",
    "start_browser",
    "load_template",
    "DashboardServer",
    "DashboardTemplate",
    "ResultStream",
    "ServerError",
    "StreamClosed",
    "TemplateLoadError",
]
