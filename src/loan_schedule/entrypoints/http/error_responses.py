"""Error payloads of the schedule API, as documented in OpenAPI."""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """One rejected field: a loan term, a record column or a request setting."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "principal",
                "message": "principal must be > 0",
                "code": "INVALID_VALUE",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response.

    ``errors`` lists the rejected fields and is omitted for broken schedules
    and unexpected failures.
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"detail": "Schedule does not end at zero balance", "code": "INTERNAL_ERROR"},
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {
                            "field": "principal",
                            "message": "principal must be > 0",
                            "code": "INVALID_VALUE",
                        },
                        {
                            "field": "term_months",
                            "message": "Term starting 9999-06-01 must end on or before 9999-12-31",
                            "code": "INVALID_VALUE",
                        },
                    ],
                },
                {
                    "detail": "Required columns not found",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {
                            "field": "start_date",
                            "message": (
                                "Missing column, expected one of "
                                "['start date', 'issue date', 'disbursement date']"
                            ),
                            "code": "MISSING_COLUMN",
                        }
                    ],
                },
            ]
        }
    )
