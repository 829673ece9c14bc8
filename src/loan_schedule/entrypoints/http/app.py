from fastapi import FastAPI

from loan_schedule.entrypoints.http.exception_handlers import register_exception_handlers
from loan_schedule.entrypoints.http.routes.health import router as health_router
from loan_schedule.entrypoints.http.routes.schedules import router as schedules_router


def build_app() -> FastAPI:
    app = FastAPI(
        title="Loan Schedule API",
        description="""
        Loan repayment schedule calculator.

        ## Features
        - Differentiated (equal principal) and annuity (equal payment) schedules
        - Calendar (day-of-month) and fixed-length interest periods
        - Monthly and actual/365 rate conventions
        - Terms from structured JSON or from a header -> value record

        ## Error Handling
        All errors return structured JSON responses with error codes.
        See the error response schemas in the API documentation.
        """,
        version="0.1.0",
        docs_url="/docs",  # Swagger UI
        redoc_url="/redoc",  # ReDoc alternative
        openapi_url="/openapi.json",  # OpenAPI schema
    )

    # Register global exception handlers
    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(schedules_router, prefix="/v1")

    return app


app = build_app()
