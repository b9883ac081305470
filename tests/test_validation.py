import pytest

from budget_tracker.errors import ValidationError
from budget_tracker.validation import (
    budget_errors,
    transaction_errors,
    validate_budget,
    validate_transaction,
)


def _valid_input(**overrides):
    data = {
        'type': 'expense',
        'amount': 42.5,
        'category': 'Food & Dining',
        'description': 'Lunch with team',
        'date': '2024-03-15',
    }
    data.update(overrides)
    return data


def test_valid_transaction_is_normalized():
    result = validate_transaction(_valid_input(
        amount='12.50',
        category='  Shopping ',
        description='\tNew shoes  ',
    ))
    assert result == {
        'type': 'expense',
        'amount': 12.5,
        'category': 'Shopping',
        'description': 'New shoes',
        'date': '2024-03-15',
    }


def test_normalized_transaction_validates_to_itself():
    first = validate_transaction(_valid_input(category=' Salary ', type='income', amount='3000'))
    assert validate_transaction(first) == first


def test_extra_keys_are_dropped():
    result = validate_transaction(_valid_input(id='abc', note='ignored'))
    assert set(result) == {'type', 'amount', 'category', 'description', 'date'}


def test_all_errors_are_reported_together():
    with pytest.raises(ValidationError) as excinfo:
        validate_transaction({
            'type': 'transfer',
            'amount': -5,
            'category': '   ',
            'description': '',
            'date': '15/03/2024',
        })
    assert excinfo.value.errors == [
        "Type must be 'income' or 'expense'",
        "Amount must be positive",
        "Category is required",
        "Description is required",
        "Invalid date format",
    ]
    assert str(excinfo.value) == "; ".join(excinfo.value.errors)


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        validate_transaction(_valid_input(amount=0))


@pytest.mark.parametrize('amount, message', [
    (0, "Amount must be positive"),
    (1_000_000_000, "Amount too large"),
    ('abc', "Amount must be a number"),
    (float('nan'), "Amount must be a number"),
    (float('inf'), "Amount must be a number"),
    (True, "Amount must be a number"),
    (None, "Amount must be a number"),
])
def test_amount_constraints(amount, message):
    assert transaction_errors(_valid_input(amount=amount)) == [message]


def test_amount_upper_bound_is_inclusive():
    assert validate_transaction(_valid_input(amount=999_999_999))['amount'] == 999_999_999.0


def test_text_length_limits():
    assert transaction_errors(_valid_input(category='x' * 101)) == ["Category too long"]
    assert transaction_errors(_valid_input(description='y' * 501)) == [
        "Description must be less than 500 characters"
    ]
    # Length is measured after trimming
    assert transaction_errors(_valid_input(category=' ' + 'x' * 100 + ' ')) == []


@pytest.mark.parametrize('value', ['2024-3-15', '2024-03-15T10:00', '2024-03-15\n', '', None, 20240315])
def test_date_must_match_pattern(value):
    assert transaction_errors(_valid_input(date=value)) == ["Invalid date format"]


def test_date_shape_only_is_checked():
    # Calendar validity is not checked, only the YYYY-MM-DD shape
    assert transaction_errors(_valid_input(date='2024-13-45')) == []


def test_type_must_match_exactly():
    assert transaction_errors(_valid_input(type='Income')) == ["Type must be 'income' or 'expense'"]


def test_valid_budget():
    assert validate_budget({'category': ' Shopping ', 'limit': '200'}) == {
        'category': 'Shopping',
        'limit': 200.0,
    }


def test_budget_rejects_zero_limit():
    assert budget_errors({'category': 'Shopping', 'limit': 0}) == ["Limit must be positive"]


def test_budget_collects_every_error():
    assert budget_errors({'category': '', 'limit': 2_000_000_000}) == [
        "Category is required",
        "Limit too large",
    ]


def test_budget_errors_empty_when_valid():
    assert budget_errors({'category': 'Healthcare', 'limit': 50}) == []
