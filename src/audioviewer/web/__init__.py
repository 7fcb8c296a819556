"""
Web presentation layer: FastAPI app, HTML templates, and audio range streaming.
"""

from audioviewer.web.app import create_app

__all__ = ["create_app"]
