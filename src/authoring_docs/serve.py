"""Local HTTP server for browsing a finished documentation build."""

import functools
import webbrowser
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from authoring_docs.errors import DocsBuildError
from authoring_docs.log import get_logger

logger = get_logger(__name__)


def make_server(root: Path, port: int) -> ThreadingHTTPServer:
    """Create (but do not start) a static file server for `root`."""
    if not root.is_dir():
        raise DocsBuildError(f"Nothing to serve at {root}; run the build first")
    handler = functools.partial(SimpleHTTPRequestHandler, directory=str(root))
    return ThreadingHTTPServer(("localhost", port), handler)


def serve(root: Path, port: int, open_browser: bool = False) -> None:
    """Serve `root` until interrupted."""
    server = make_server(root, port)
    url = f"http://localhost:{port}"
    logger.info("docs_served", url=url, root=str(root))
    if open_browser:
        webbrowser.open(url)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("docs_server_stopped")
    finally:
        server.server_close()
