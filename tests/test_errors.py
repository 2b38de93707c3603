import pytest

from midnotes.errors import InvalidInputError, NoteServiceError, NotFoundError


def test_not_found_has_fixed_message():
    assert str(NotFoundError()) == "not found"


def test_invalid_input_message_is_prefixed():
    err = InvalidInputError("tag name cannot be empty")
    assert str(err) == "invalid input: tag name cannot be empty"
    assert err.message == "tag name cannot be empty"


@pytest.mark.parametrize("error", [NotFoundError(), InvalidInputError("bad")])
def test_specific_errors_are_service_errors(error):
    with pytest.raises(NoteServiceError) as info:
        raise error
    assert info.value is error