"""crawlreport HTTP API layer.

This package provides the Falcon ASGI application serving job reports,
document listings and spreadsheet downloads for batch crawl jobs.

Usage
-----
Create and run the application::

    from crawlreport.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # full mode with report endpoints

"""

from crawlreport.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
