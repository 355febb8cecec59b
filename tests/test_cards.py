import pytest

from cardperks.services.cards import (
    FullCardNumberError,
    InvalidCardFormatError,
    extract_bin,
    format_card_input,
    is_valid_masked_card,
    sanitize_card_display,
    validate_masked_card,
)


@pytest.mark.parametrize(
    "raw",
    ["4242-****-****-1234", "4242********1234", "4242 XXXX XXXX 1234", "4000xxxxxxxx9999", "4111*"],
)
def test_accepts_masked_numbers(raw):
    assert is_valid_masked_card(raw)
    assert validate_masked_card(raw) == raw.replace(" ", "").replace("-", "")


@pytest.mark.parametrize(
    "raw", ["4242111122223333", "4242-1111-2222-3333", "4242 1111 2222 3333", "0000000000000000"]
)
def test_full_card_numbers_are_a_policy_violation(raw):
    with pytest.raises(FullCardNumberError) as excinfo:
        validate_masked_card(raw)
    assert excinfo.value.code == "full_card_number"
    assert not is_valid_masked_card(raw)


@pytest.mark.parametrize("raw", ["****-****-****-1234", "42a2-****-****-1234", "X242********1234", "abcd****", ""])
def test_rejects_when_bin_is_not_digits(raw):
    with pytest.raises(InvalidCardFormatError):
        validate_masked_card(raw)


@pytest.mark.parametrize("raw", ["4242", "42421234", "424211112222333", "42421111222233334"])
def test_rejects_unmasked_partial_numbers(raw):
    with pytest.raises(InvalidCardFormatError) as excinfo:
        validate_masked_card(raw)
    assert excinfo.value.code == "invalid_format"


def test_error_messages_differ():
    assert FullCardNumberError().args[0] != InvalidCardFormatError().args[0]


def test_concrete_scenario():
    raw = "4242-****-****-1234"
    assert is_valid_masked_card(raw)
    assert format_card_input(raw) == "4242-****-****-1234"
    assert extract_bin(raw) == "4242"


def test_format_regroups_without_changing_characters():
    assert format_card_input("4242xxxxXXXX1234") == "4242-xxxx-XXXX-1234"
    assert format_card_input("4242 **") == "4242-**"
    assert format_card_input("") == ""


def test_extract_bin_ignores_separators():
    assert extract_bin(" 4 2 4 2-****") == "4242"


def test_display_never_echoes_input():
    assert sanitize_card_display("4242-****-****-1234") == "4242-****-****-****"
    assert sanitize_card_display("42") == "****-****-****-****"
