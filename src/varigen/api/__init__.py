"""Illustration Variation Generator: FastAPI REST API layer.

This package contains the FastAPI application and its Pydantic response
models.

Modules
-------
main
    FastAPI application with the route handlers, error mapping, and the
    ``main()`` CLI entry point.
models
    Pydantic models for API responses.
"""
