"""HTTP trigger for on-demand pipeline runs."""

from .app import create_app

__all__ = ["create_app"]
