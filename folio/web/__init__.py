"""Flask boundary: resume API, PDF download and public resume pages."""

from folio.web.app import create_app

__all__ = ["create_app"]
