"""Tests for REST error response models."""

from loan_schedule.entrypoints.http.error_responses import ErrorDetail, ErrorResponse


class TestErrorDetail:
    """Tests for ErrorDetail model."""

    def test_creates_error_detail_with_all_fields(self) -> None:
        """ErrorDetail can be created with field, message, and code."""
        detail = ErrorDetail(
            field="principal",
            message="principal must be > 0",
            code="INVALID_VALUE",
        )

        assert detail.field == "principal"
        assert detail.message == "principal must be > 0"
        assert detail.code == "INVALID_VALUE"

    def test_creates_error_detail_without_code(self) -> None:
        """ErrorDetail can be created without code (optional)."""
        detail = ErrorDetail(field="term_months", message="term_months must be > 0")

        assert detail.code is None

    def test_serializes_to_dict(self) -> None:
        """ErrorDetail serializes to dict correctly."""
        detail = ErrorDetail(
            field="interest_period.days",
            message="Must be a valid integer: monthly",
            code="INVALID_INTEGER",
        )

        assert detail.model_dump() == {
            "field": "interest_period.days",
            "message": "Must be a valid integer: monthly",
            "code": "INVALID_INTEGER",
        }


class TestErrorResponse:
    """Tests for ErrorResponse model."""

    def test_creates_simple_error_response(self) -> None:
        """ErrorResponse can be created with just detail and code."""
        response = ErrorResponse(detail="An unexpected error occurred", code="INTERNAL_ERROR")

        assert response.detail == "An unexpected error occurred"
        assert response.code == "INTERNAL_ERROR"
        assert response.errors is None

    def test_creates_error_response_with_field_errors(self) -> None:
        """ErrorResponse can include field-level errors."""
        errors = [
            ErrorDetail(field="principal", message="Missing column", code="MISSING_COLUMN"),
            ErrorDetail(field="start_date", message="Missing column", code="MISSING_COLUMN"),
        ]

        response = ErrorResponse(
            detail="Required columns not found", code="VALIDATION_ERROR", errors=errors
        )

        assert response.errors == errors

    def test_serializes_simple_error_to_dict(self) -> None:
        response = ErrorResponse(
            detail="previous accrual date must not be None", code="INVALID_ARGUMENT"
        )

        assert response.model_dump() == {
            "detail": "previous accrual date must not be None",
            "code": "INVALID_ARGUMENT",
            "errors": None,
        }

    def test_serializes_complex_error_to_json(self) -> None:
        """ErrorResponse serializes complex error with multiple fields."""
        errors = [
            ErrorDetail(field="principal", message="Invalid", code="INVALID_DECIMAL"),
            ErrorDetail(field="annual_rate_percent", message="Invalid", code="INVALID_DECIMAL"),
        ]

        json_str = ErrorResponse(
            detail="Validation failed", code="VALIDATION_ERROR", errors=errors
        ).model_dump_json()

        assert '"detail":"Validation failed"' in json_str
        assert '"field":"principal"' in json_str
        assert '"field":"annual_rate_percent"' in json_str

    def test_parses_validation_error_from_dict(self) -> None:
        """ErrorResponse can be parsed from the handler payload."""
        data = {
            "detail": "Validation failed",
            "code": "VALIDATION_ERROR",
            "errors": [
                {
                    "field": "principal",
                    "message": "principal must be > 0",
                    "code": "INVALID_VALUE",
                }
            ],
        }

        response = ErrorResponse.model_validate(data)

        assert response.errors[0].field == "principal"
        assert response.errors[0].code == "INVALID_VALUE"


class TestSchemaExamples:
    """Example payloads in the OpenAPI schema validate against their models."""

    def test_error_response_examples_are_valid(self) -> None:
        schema = ErrorResponse.model_json_schema()

        assert len(schema["examples"]) >= 2
        for example in schema["examples"]:
            response = ErrorResponse.model_validate(example)
            assert response.code is not None

        assert ErrorResponse.model_validate(schema["examples"][1]).errors

    def test_error_detail_example_is_valid(self) -> None:
        example = ErrorDetail.model_json_schema()["example"]

        detail = ErrorDetail.model_validate(example)

        assert detail.field == "principal"

    def test_examples_cover_terms_and_record_rejections(self) -> None:
        examples = ErrorResponse.model_json_schema()["examples"]

        field_codes = {
            error["code"] for example in examples for error in example.get("errors", [])
        }

        assert field_codes == {"INVALID_VALUE", "MISSING_COLUMN"}
        assert {example["code"] for example in examples} == {
            "INTERNAL_ERROR",
            "VALIDATION_ERROR",
        }
