from budget_tracker import visualization as viz


def test_empty_inputs_produce_placeholder():
    for fig in (
        viz.create_category_pie_chart([]),
        viz.create_trend_chart([]),
        viz.create_budget_progress_chart([]),
    ):
        assert fig.layout.title.text == "No data to display"


def test_trend_chart_has_income_and_expense_series():
    fig = viz.create_trend_chart([
        {'label': 'Jan', 'start': '2024-01-01', 'end': '2024-01-31', 'income': 100.0, 'expenses': 40.0},
        {'label': 'Feb', 'start': '2024-02-01', 'end': '2024-02-29', 'income': 0.0, 'expenses': 10.0},
    ])
    assert [trace.name for trace in fig.data] == ['Income', 'Expenses']
    assert list(fig.data[0].x) == ['Jan', 'Feb']


def test_pie_chart_uses_breakdown_totals():
    fig = viz.create_category_pie_chart(
        [{'category': 'Shopping', 'total': 30.0}, {'category': 'Other', 'total': 10.0}],
        format_amount=lambda amount: f"${amount:.2f}",
    )
    assert list(fig.data[0].values) == [30.0, 10.0]


def test_progress_chart_colours_by_status():
    fig = viz.create_budget_progress_chart([
        {'category': 'Shopping', 'percentage': 125.0, 'status': 'over'},
        {'category': 'Other', 'percentage': 10.0, 'status': 'ok'},
    ])
    assert list(fig.data[0].marker.color) == [viz.STATUS_COLORS['over'], viz.STATUS_COLORS['ok']]
