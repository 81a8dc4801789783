"""Qwen Studio - FastAPI REST API layer.

This package contains the FastAPI application, the Pydantic request model,
and the helpers that turn normalized images and errors into HTTP responses.

Modules
-------
main
    FastAPI application with the route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request validation.
responses
    Image and JSON error response builders.
"""
