"""Tests for iosgen.utils.validator."""

import pytest

from iosgen.errors import InvalidRequest
from iosgen.utils.validator import is_valid_request_id, validate_request_id


class TestValidateRequestId:
    def test_positive_int_returned(self):
        assert validate_request_id(42) == 42

    @pytest.mark.parametrize("request_id", [None, 0, -1, True, "42", 4.2])
    def test_invalid_ids_raise(self, request_id):
        with pytest.raises(InvalidRequest):
            validate_request_id(request_id)

    def test_is_valid_request_id(self):
        assert is_valid_request_id(1)
        assert not is_valid_request_id(0)
