"""
Tests for schema validation.
"""

import pytest
from jobly.errors import BadRequestError
from jobly.schema import (
    COMPANY_NEW,
    JOB_NEW,
    JOB_UPDATE,
    USER_NEW,
    USER_REGISTER,
    validate_or_raise,
    validate_payload,
)


class TestValidatePayload:
    """Test the generic validation function."""

    def test_valid_job(self, new_job):
        assert validate_payload(new_job, JOB_NEW) == []

    def test_missing_required_field(self):
        errors = validate_payload({"title": "x"}, JOB_NEW)
        assert any("companyHandle" in err for err in errors)

    def test_empty_string_field(self, new_job):
        errors = validate_payload({**new_job, "title": "   "}, JOB_NEW)
        assert errors == ["Field 'title' must be a non-empty string"]

    def test_unexpected_field(self):
        errors = validate_payload({"title": "x", "color": "red"}, JOB_UPDATE)
        assert errors == ["Unexpected field: color"]

    def test_nullable_fields(self):
        assert validate_payload({"salary": None, "equity": None}, JOB_UPDATE) == []

    def test_non_nullable_field(self):
        assert validate_payload({"title": None}, JOB_UPDATE) == ["Field 'title' may not be null"]

    @pytest.mark.parametrize("salary", [-1, "100", 1.5, True])
    def test_bad_salary(self, salary):
        assert validate_payload({"salary": salary}, JOB_UPDATE)

    @pytest.mark.parametrize("equity", ["0", "0.5", "1", "1.0"])
    def test_good_equity(self, equity):
        assert validate_payload({"equity": equity}, JOB_UPDATE) == []

    @pytest.mark.parametrize("equity", ["1.1", "-0.1", "abc", 0.5])
    def test_bad_equity(self, equity):
        assert validate_payload({"equity": equity}, JOB_UPDATE)

    def test_invalid_url(self, new_company):
        errors = validate_payload({**new_company, "logoUrl": "not-a-url"}, COMPANY_NEW)
        assert any("url" in err.lower() for err in errors)

    def test_handle_too_long(self, new_company):
        errors = validate_payload({**new_company, "handle": "h" * 26}, COMPANY_NEW)
        assert any("handle" in err for err in errors)

    def test_password_length(self, new_user):
        assert validate_payload({**new_user, "password": "abc"}, USER_REGISTER)
        assert validate_payload(new_user, USER_REGISTER) == []

    def test_register_rejects_is_admin(self, new_user):
        assert validate_payload({**new_user, "isAdmin": True}, USER_REGISTER) == ["Unexpected field: isAdmin"]
        assert validate_payload({**new_user, "isAdmin": True}, USER_NEW) == []

    def test_email(self, new_user):
        assert validate_payload({**new_user, "email": "not-an-email"}, USER_NEW)

    def test_not_an_object(self):
        assert validate_payload(["title"], JOB_UPDATE) == ["Payload must be an object"]


class TestValidateOrRaise:

    def test_raises_with_all_errors(self):
        with pytest.raises(BadRequestError) as exc:
            validate_or_raise({"salary": -1, "color": "red"}, JOB_UPDATE)
        assert "salary" in exc.value.message
        assert "color" in exc.value.message

    def test_passes(self):
        validate_or_raise({"title": "ok"}, JOB_UPDATE)
