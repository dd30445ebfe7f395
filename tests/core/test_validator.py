"""
Unit Tests for Schema Validation

Tests for the exam service payload validators.
"""

import pytest

from cbt_toolkit.core.schemas import (
    ValidationError,
    validate_envelope,
    validate_preview,
    validate_question,
    validate_question_list,
)


class TestValidateQuestion:
    """Tests for validate_question."""

    def test_validate_when_valid_then_passes(self, question_json):
        validate_question(question_json)
        validate_question(question_json, strict=True)

    def test_validate_when_missing_fields_then_lists_them(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_question({"questionType": "Theory"})
        assert "Missing field: _id" in exc_info.value.errors
        assert "Missing field: marks" in exc_info.value.errors

    def test_validate_when_unknown_type_then_raises_error(self, question_json):
        question_json["questionType"] = "Essay"
        with pytest.raises(ValidationError, match="Invalid questionType"):
            validate_question(question_json)

    def test_validate_when_marks_out_of_range_then_reports_path(self, question_json):
        question_json["marks"] = 0
        with pytest.raises(ValidationError) as exc_info:
            validate_question(question_json, path="questions[3]")
        assert exc_info.value.path == "questions[3].marks"

    def test_validate_when_option_has_no_text_then_raises_error(self, question_json):
        question_json["options"] = [{"isCorrect": True}]
        with pytest.raises(ValidationError, match="option must have text"):
            validate_question(question_json)

    def test_validate_when_not_object_then_raises_error(self):
        with pytest.raises(ValidationError, match="must be an object"):
            validate_question(["q1"])

    def test_validate_when_strict_and_bad_difficulty_then_schema_fails(self, question_json):
        question_json["difficulty"] = "Impossible"
        validate_question(question_json)
        with pytest.raises(ValidationError, match="Schema validation failed"):
            validate_question(question_json, strict=True)


class TestValidateLists:
    """Tests for list, preview and envelope validation."""

    def test_validate_question_list_when_bad_item_then_reports_index(self, question_json):
        with pytest.raises(ValidationError) as exc_info:
            validate_question_list([question_json, {"_id": "x"}])
        assert exc_info.value.path == "questions[1]"

    def test_validate_question_list_when_not_list_then_raises_error(self):
        with pytest.raises(ValidationError, match="must be a list"):
            validate_question_list({"questions": []})

    def test_validate_preview_when_type_mismatch_then_raises_error(self, question_json):
        with pytest.raises(ValidationError, match="theory preview holds a Objective"):
            validate_preview({"objective": [], "theory": [question_json]})

    def test_validate_preview_when_keys_missing_then_passes(self):
        validate_preview({}, strict=True)

    def test_validate_envelope_when_success_missing_then_raises_error(self):
        with pytest.raises(ValidationError, match="boolean 'success'"):
            validate_envelope({"data": {}})

    def test_validate_envelope_when_message_not_string_then_raises_error(self):
        with pytest.raises(ValidationError, match="message must be a string"):
            validate_envelope({"success": True, "message": 5})
