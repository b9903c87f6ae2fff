"""CGI entry point: one tracker invocation per process."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import TextIO

from backend.app.core.config import get_settings
from backend.app.core.logging import configure_logging
from backend.app.main import build_tracker_service
from backend.app.tracker import StateWriteError
from backend.app.tracker.render import render_page

logger = logging.getLogger(__name__)

HTML_HEADER = "Content-type: text/html\r\n\r\n"


def run_cgi(environ: Mapping[str, str] | None = None, stream: TextIO | None = None) -> int:
    environ = os.environ if environ is None else environ
    stream = sys.stdout if stream is None else stream

    configure_logging()
    service = build_tracker_service(get_settings())

    try:
        result = service.handle_query(environ.get("QUERY_STRING"))
    except StateWriteError as exc:
        logger.error("State write failed: %s", exc)
        stream.write("Status: 500 Internal Server Error\r\n" + HTML_HEADER)
        stream.write("<h1>Unable to save tracker state</h1>\n")
        return 1

    stream.write(HTML_HEADER)
    stream.write(render_page(result.state, result.config, result.now))
    return 0


if __name__ == "__main__":
    sys.exit(run_cgi())
