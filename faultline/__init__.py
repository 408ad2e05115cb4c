"""faultline: error classification and response normalization for FastAPI.

Quick start:
    from fastapi import FastAPI
    from faultline.presentation.errors import register_exception_handlers
    from faultline.presentation.middleware import RequestIdMiddleware

    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)
"""

__version__ = "0.1.0"
