"""
Tests for the validation error formatter.

Pydantic reports errors as dicts with "type", "loc", and "msg"; the API
groups them by field into human-readable messages.
"""

from debit_api.exceptions import format_validation_errors


class TestFormatValidationErrors:

    def test_missing_field(self):
        errors = [{"type": "missing", "loc": ("body", "is_active"), "msg": "Field required"}]
        assert format_validation_errors(errors) == {
            "is_active": ["The is active field is required."]
        }

    def test_wrong_boolean(self):
        errors = [
            {"type": "bool_type", "loc": ("body", "is_active"), "msg": "Input should be a valid boolean"}
        ]
        assert format_validation_errors(errors) == {
            "is_active": ["The is active field must be true or false."]
        }

    def test_query_parameter(self):
        errors = [{"type": "int_parsing", "loc": ("query", "debit_card_id"), "msg": "bad"}]
        assert format_validation_errors(errors) == {
            "debit_card_id": ["The debit card id field must be an integer."]
        }

    def test_unknown_type_keeps_pydantic_message(self):
        errors = [
            {"type": "greater_than", "loc": ("body", "amount"), "msg": "Input should be greater than 0"}
        ]
        assert format_validation_errors(errors) == {
            "amount": ["The amount field is invalid: Input should be greater than 0."]
        }

    def test_multiple_errors_grouped_by_field(self):
        errors = [
            {"type": "missing", "loc": ("body", "debit_card_id"), "msg": "Field required"},
            {"type": "missing", "loc": ("body", "amount"), "msg": "Field required"},
        ]
        result = format_validation_errors(errors)
        assert set(result) == {"debit_card_id", "amount"}

    def test_missing_body(self):
        errors = [{"type": "missing", "loc": ("body",), "msg": "Field required"}]
        assert format_validation_errors(errors) == {
            "body": ["The body field is required."]
        }

    def test_malformed_json_is_reported_under_body(self):
        errors = [
            {"type": "json_invalid", "loc": ("body", 14), "msg": "JSON decode error"}
        ]
        assert format_validation_errors(errors) == {
            "body": ["The request body must be valid JSON."]
        }
