#!/usr/bin/env python3
"""
Simple runner script for the Roof Quote API
"""

import logging

from roofquote.app import create_app
from roofquote.settings import get_settings

if __name__ == '__main__':
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    app = create_app(settings)
    logging.getLogger(__name__).info(
        "Starting Roof Quote API on http://%s:%d", settings.host, settings.port
    )
    app.run(debug=settings.debug, host=settings.host, port=settings.port)
