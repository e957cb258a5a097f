"""Tests for field patch helpers."""

from types import SimpleNamespace

import pytest

from intelhub.domain.fields import apply_edit, parse_bool, required, single_value
from intelhub.errors import FunctionalError


class TestFieldHelpers:
    def test_single_value(self):
        assert single_value(["a", "b"]) == "a"
        assert single_value([]) is None
        assert single_value(None) is None

    @pytest.mark.parametrize(
        "value,expected",
        [("true", True), ("True", True), ("false", False), ("1", False), (None, False)],
    )
    def test_parse_bool(self, value, expected):
        assert parse_bool(value) is expected

    def test_required_rejects_empty(self):
        parser = required("name")

        assert parser(["Ada"]) == "Ada"
        with pytest.raises(FunctionalError, match="Field name cannot be empty"):
            parser([""])

    def test_apply_edit(self):
        entity = SimpleNamespace(description=None)

        apply_edit(entity, {"description": single_value}, "description", ["hello"])

        assert entity.description == "hello"

    def test_apply_edit_unknown_key(self):
        with pytest.raises(FunctionalError) as exc_info:
            apply_edit(SimpleNamespace(), {}, "secret", ["x"])

        assert exc_info.value.extensions == {"code": "FUNCTIONAL_ERROR", "key": "secret"}
