import json

import pytest

from budget_tracker.errors import PersistenceReadError, PersistenceWriteError
from budget_tracker.models import Budget, BudgetState, Transaction
from budget_tracker.storage import BudgetStorage, LocalStorage, parse_state, safe_filename


def _sample_state():
    return BudgetState(
        transactions=[
            Transaction('b2', 'expense', 19.99, 'Shopping', 'Socks', '2024-02-03'),
            Transaction('a1', 'income', 3000.0, 'Salary', 'February pay', '2024-02-01'),
        ],
        budgets=[
            Budget('Shopping', 200.0, 19.99),
            Budget('Food & Dining', 400.0, 0.0),
        ],
    )


def test_safe_filename():
    assert safe_filename('budget-tracker-data') == 'budget-tracker-data'
    assert safe_filename('my key!') == 'my_key'
    assert safe_filename('') == 'slot'


def test_local_storage_round_trip(tmp_path):
    storage = LocalStorage(tmp_path)
    assert storage.get_item('pref') is None
    storage.set_item('pref', 'EUR')
    assert storage.get_item('pref') == 'EUR'
    storage.remove_item('pref')
    assert storage.get_item('pref') is None
    storage.remove_item('pref')  # should not raise


def test_local_storage_creates_directory(tmp_path):
    storage = LocalStorage(tmp_path / 'nested' / 'data')
    storage.set_item('k', 'v')
    assert (tmp_path / 'nested' / 'data' / 'k.json').read_text(encoding='utf-8') == 'v'


def test_save_then_load_preserves_state_and_order(tmp_path):
    storage = BudgetStorage(LocalStorage(tmp_path))
    state = _sample_state()
    storage.save(state)
    loaded = storage.load()
    assert loaded == state
    assert [t.id for t in loaded.transactions] == ['b2', 'a1']
    assert [b.category for b in loaded.budgets] == ['Shopping', 'Food & Dining']


def test_saved_document_shape(tmp_path):
    local = LocalStorage(tmp_path)
    BudgetStorage(local).save(_sample_state())
    document = json.loads(local.get_item('budget-tracker-data'))
    assert set(document) == {'transactions', 'budgets'}
    assert document['budgets'][0] == {'category': 'Shopping', 'limit': 200.0, 'spent': 19.99}
    assert document['transactions'][1] == {
        'id': 'a1',
        'type': 'income',
        'amount': 3000.0,
        'category': 'Salary',
        'description': 'February pay',
        'date': '2024-02-01',
    }


def test_load_missing_slot_returns_empty_state(tmp_path):
    assert BudgetStorage(LocalStorage(tmp_path)).load() == BudgetState.empty()


@pytest.mark.parametrize('raw', [
    'not json at all',
    '[]',
    '{"transactions": []}',
    '{"transactions": {}, "budgets": []}',
    '{"transactions": [{"id": 1}], "budgets": []}',
    '{"transactions": [], "budgets": [{"category": "Food", "limit": "200", "spent": 0}]}',
    '{"transactions": [], "budgets": [{"category": "Food", "limit": true, "spent": 0}]}',
    '{"transactions": [{"id": "x", "type": "transfer", "amount": 5, "category": "Other", '
    '"description": "d", "date": "2024-01-01"}], "budgets": []}',
    '{"transactions": [], "budgets": [{"category": "Food", "limit": NaN, "spent": 0}]}',
    '{"transactions": [], "budgets": [{"category": "Food", "limit": 200, "spent": Infinity}]}',
    '{"transactions": [{"id": "x", "type": "expense", "amount": -Infinity, "category": "Other", '
    '"description": "d", "date": "2024-01-01"}], "budgets": []}',
])
def test_load_corrupt_slot_returns_empty_state(tmp_path, raw):
    local = LocalStorage(tmp_path)
    local.set_item('budget-tracker-data', raw)
    assert BudgetStorage(local).load() == BudgetState.empty()


def test_load_unreadable_slot_returns_empty_state(tmp_path):
    local = LocalStorage(tmp_path)
    # A directory in place of the slot file cannot be read
    local.get_path('budget-tracker-data').mkdir(parents=True)
    assert BudgetStorage(local).load() == BudgetState.empty()


def test_parse_state_reports_schema_errors():
    with pytest.raises(PersistenceReadError):
        parse_state('{"transactions": [], "budgets": "none"}')


def test_parse_state_accepts_integer_amounts():
    state = parse_state(json.dumps({
        'transactions': [{
            'id': 'x', 'type': 'expense', 'amount': 5, 'category': 'Other',
            'description': 'Coffee', 'date': '2024-01-01',
        }],
        'budgets': [{'category': 'Other', 'limit': 10, 'spent': 5}],
    }))
    assert state.transactions[0].amount == 5.0
    assert state.budgets[0].over_limit is False


def test_save_failure_raises_write_error(tmp_path, monkeypatch):
    local = LocalStorage(tmp_path)

    def broken_set_item(key, value):
        raise OSError('disk full')

    monkeypatch.setattr(local, 'set_item', broken_set_item)
    with pytest.raises(PersistenceWriteError, match='disk full'):
        BudgetStorage(local).save(_sample_state())


def test_parse_state_rejects_unknown_transaction_type():
    with pytest.raises(PersistenceReadError, match='transfer'):
        parse_state(json.dumps({
            'transactions': [{
                'id': 'x', 'type': 'transfer', 'amount': 5, 'category': 'Other',
                'description': 'Move', 'date': '2024-01-01',
            }],
            'budgets': [],
        }))


def test_save_refuses_non_finite_numbers(tmp_path):
    local = LocalStorage(tmp_path)
    storage = BudgetStorage(local)
    storage.save(_sample_state())
    before = local.get_item('budget-tracker-data')

    broken = BudgetState(budgets=[Budget('Food', float('nan'), float('inf'))])
    with pytest.raises(PersistenceWriteError):
        storage.save(broken)
    # The previous document is left untouched and stays valid JSON
    assert local.get_item('budget-tracker-data') == before
    assert storage.load() == _sample_state()
