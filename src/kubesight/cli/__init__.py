# src/kubesight/cli/__init__.py
"""
KubeSight CLI Package

This package exposes the top-level Typer `app` so tests and the console
entrypoint can import `kubesight.cli.app`.
"""

from .main import app

__all__ = ["app"]
