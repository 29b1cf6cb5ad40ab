"""Demo backend serving the dashboard API from the fake data provider."""

from arbview.server.app import create_app


__all__ = ["create_app"]
