"""promptgate: FastAPI gateway layer.

This package contains the FastAPI application factory, the Pydantic request
and payload models, and the upstream payload compilation logic.

Modules
-------
main
    FastAPI application factory with all route handlers and the ``main()``
    CLI entry point.
models
    Pydantic models for the gateway request, the upstream payload, and the
    structured gateway error.
payload_builder
    Prompt request to ``generateContent`` body compilation.
"""
