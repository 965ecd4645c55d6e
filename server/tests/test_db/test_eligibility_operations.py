# Order eligibility resolver tests
# Clock is fixed at 2025-03-10 10:00 local (a Monday)

import asyncio
from datetime import datetime

import pytest

from db.eligibility_operations import EligibilityOperations
from db.manager import DatabaseManager


def resolve(ops, request):
    return asyncio.run(ops.resolve(request))


def with_changes(base, **changes):
    request = dict(base)
    request.update(changes)
    return request


class TestEligibleOrders:
    """Orders that pass every check"""

    def test_bpl_single_thali(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, eligibility_request)

        assert result['success'] is True
        assert result['code'] == 'ok'
        data = result['data']
        assert data['train']['train_number'] == 12345
        assert data['stop']['station_code'] == 'BPL'
        assert data['arrival_date'] == '2025-03-10'
        assert data['arrival_time'] == '14:30'
        assert data['restaurant']['restro_code'] == 'R100'
        assert data['restaurant']['min_order'] == 200.0
        assert data['restaurant']['cutoff_minutes'] == 90

        pricing = data['pricing']
        assert pricing['subtotal_paise'] == 25000
        assert pricing['gst_paise'] == 1250
        assert pricing['platform_charge_paise'] == 2000
        assert pricing['total_paise'] == 28250
        assert pricing['total'] == 282.5

    def test_priced_lines(self, eligibility_ops, eligibility_request):
        request = with_changes(eligibility_request, items=[
            {'item_id': 1, 'qty': 1}, {'item_id': 6, 'qty': 3}, {'item_id': 9, 'qty': 0}
        ])
        result = resolve(eligibility_ops, request)

        lines = result['data']['lines']
        # zero-quantity lines are dropped
        assert [(l['item_id'], l['qty'], l['line_total_paise']) for l in lines] == [(1, 1, 25000), (6, 3, 6000)]
        assert result['data']['pricing']['item_count'] == 4

    def test_inputs_are_normalized(self, eligibility_ops, eligibility_request):
        request = with_changes(eligibility_request, station_code=' bpl ', restro_code='r100', train='superfast')
        assert resolve(eligibility_ops, request)['success'] is True

    def test_overnight_stop_with_boarding_station(self, eligibility_ops):
        # boarding NDLS on day 1 puts BZA (day 2) on 2025-03-11 00:15
        result = resolve(eligibility_ops, {
            'train': '12345', 'station_code': 'BZA', 'date': '2025-03-10',
            'restro_code': 'R300', 'boarding': 'NDLS',
            'items': [{'item_id': 20, 'qty': 1}],
        })

        assert result['success'] is True
        assert result['data']['arrival_date'] == '2025-03-11'
        assert result['data']['arrival_time'] == '00:15'
        assert result['data']['restaurant']['min_order'] is None
        assert result['data']['pricing']['subtotal_paise'] == 20000

    def test_repeated_resolution_is_identical(self, eligibility_ops, eligibility_request):
        first = resolve(eligibility_ops, eligibility_request)
        second = resolve(eligibility_ops, eligibility_request)
        assert first == second


class TestInputRejections:
    """Malformed requests"""

    def test_missing_fields(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, train='', restro_code=None))

        assert result['code'] == 'missing_params'
        assert result['meta']['missing'] == ['train', 'restro_code']

    def test_invalid_date(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, date='10-03-2025'))
        assert result['code'] == 'invalid_date'

    def test_empty_cart(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, items=[{'item_id': 1, 'qty': 0}]))
        assert result['code'] == 'empty_cart'


class TestRouteRejections:
    """Train, station and schedule checks"""

    def test_unknown_train(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, train='99999'))
        assert result['code'] == 'train_not_found'

    def test_station_not_on_route(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, station_code='XYZ'))

        assert result['code'] == 'station_not_on_route'
        assert result['meta'] == {'train': 12345, 'station_code': 'XYZ'}

    def test_not_running_on_date(self, eligibility_ops):
        result = resolve(eligibility_ops, {
            'train': '22222', 'station_code': 'AGC', 'date': '2025-03-10',
            'restro_code': 'R100', 'items': [{'item_id': 1, 'qty': 1}],
        })

        assert result['code'] == 'not_running_on_date'
        assert result['meta']['running_days'] == 'SAT,SUN'

    def test_unrecognised_running_days_do_not_block(self, eligibility_ops):
        # ALTERNATE names no weekday; the route is kept and the next check decides
        result = resolve(eligibility_ops, {
            'train': '33333', 'station_code': 'GWL', 'date': '2025-03-10',
            'restro_code': 'R100', 'items': [{'item_id': 1, 'qty': 1}],
        })
        assert result['code'] == 'restro_not_found'


class TestRestaurantRejections:
    """Restaurant status, calendar, cut-off and hours"""

    @pytest.mark.parametrize("restro_code", ['R101', 'R200', 'R999'])
    def test_restaurant_not_available_at_station(self, eligibility_ops, eligibility_request, restro_code):
        result = resolve(eligibility_ops, with_changes(eligibility_request, restro_code=restro_code))
        assert result['code'] == 'restro_not_found'

    def test_weekly_off(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, restro_code='R102'))

        assert result['code'] == 'weekly_off'
        assert result['meta'] == {'arrival_date': '2025-03-10', 'weekly_off': 'MON'}

    def test_holiday_closed(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, restro_code='R103'))

        assert result['code'] == 'holiday_closed'
        assert result['meta']['arrival'] == '14:30'

    def test_restaurant_cutoff(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(
            eligibility_request, restro_code='R104', items=[{'item_id': 40, 'qty': 1}]
        ))

        assert result['code'] == 'restro_cutoff'
        assert result['meta'] == {
            'cutoff_minutes': 300,
            'deadline': '2025-03-10T09:30',
            'now': '2025-03-10T10:00',
        }

    def test_default_cutoff(self, eligibility_ops):
        # without a boarding station BZA is taken on 2025-03-10 00:15, already past
        result = resolve(eligibility_ops, {
            'train': '12345', 'station_code': 'BZA', 'date': '2025-03-10',
            'restro_code': 'R300', 'items': [{'item_id': 20, 'qty': 1}],
        })

        assert result['code'] == 'cutoff_exceeded'
        assert result['meta']['cutoff_minutes'] == 90

    def test_cutoff_boundary(self, test_db, holiday_service, ordering_config, eligibility_request):
        # deadline is 13:00 for a 14:30 arrival
        at_deadline = EligibilityOperations(test_db, ordering_config, holiday_service, lambda: datetime(2025, 3, 10, 13, 0))
        past_deadline = EligibilityOperations(test_db, ordering_config, holiday_service, lambda: datetime(2025, 3, 10, 13, 1))

        assert resolve(at_deadline, eligibility_request)['success'] is True
        assert resolve(past_deadline, eligibility_request)['code'] == 'cutoff_exceeded'

    def test_restaurant_hours(self, eligibility_ops):
        result = resolve(eligibility_ops, {
            'train': '12345', 'station_code': 'NGP', 'date': '2025-03-10',
            'restro_code': 'R200', 'items': [{'item_id': 30, 'qty': 2}],
        })

        assert result['code'] == 'restro_time_mismatch'
        assert result['meta'] == {'arrival': '23:30', 'open_time': '10:00', 'close_time': '22:00'}


class TestCartRejections:
    """Item availability, serving windows and minimum order"""

    @pytest.mark.parametrize("item_id", [5, 999, 20])
    def test_item_unavailable(self, eligibility_ops, eligibility_request, item_id):
        # OFF item, unknown id, another restaurant's item
        result = resolve(eligibility_ops, with_changes(eligibility_request, items=[{'item_id': item_id, 'qty': 1}]))

        assert result['code'] == 'item_unavailable'
        assert result['meta']['items'] == [{'item_id': item_id}]

    def test_item_time_mismatch(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, items=[
            {'item_id': 1, 'qty': 1}, {'item_id': 3, 'qty': 1}
        ]))

        assert result['code'] == 'item_time_mismatch'
        assert result['meta']['items'] == [{
            'item_id': 3, 'item_name': 'Poha', 'start_time': '06:00', 'end_time': '10:30'
        }]

    def test_unavailable_reported_before_time_mismatch(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, items=[
            {'item_id': 3, 'qty': 1}, {'item_id': 5, 'qty': 1}
        ]))
        assert result['code'] == 'item_unavailable'

    def test_min_order_not_met(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, items=[{'item_id': 2, 'qty': 1}]))

        assert result['code'] == 'min_order_not_met'
        assert result['meta'] == {'min_order': 200.0, 'subtotal': 150.0}

    def test_min_order_met_with_quantity(self, eligibility_ops, eligibility_request):
        result = resolve(eligibility_ops, with_changes(eligibility_request, items=[{'item_id': 2, 'qty': 2}]))
        assert result['success'] is True


class TestQuoteCart:
    """Standalone cart pricing"""

    def test_quote(self, eligibility_ops):
        result = eligibility_ops.quote_cart('R100', [{'item_id': 2, 'qty': 1}, {'item_id': 6, 'qty': 2}])

        assert result['success'] is True
        assert result['data']['pricing']['subtotal_paise'] == 19000
        assert result['data']['pricing']['gst_paise'] == 950
        assert result['data']['pricing']['total_paise'] == 21950
        assert result['meta'] == {'min_order': 200.0, 'min_order_met': False}

    def test_quote_ignores_serving_window(self, eligibility_ops):
        result = eligibility_ops.quote_cart('R100', [{'item_id': 3, 'qty': 1}])
        assert result['success'] is True

    def test_quote_errors(self, eligibility_ops):
        assert eligibility_ops.quote_cart('R100', [])['code'] == 'empty_cart'
        assert eligibility_ops.quote_cart('R101', [{'item_id': 1, 'qty': 1}])['code'] == 'restro_not_found'
        assert eligibility_ops.quote_cart('R100', [{'item_id': 5, 'qty': 1}])['code'] == 'item_unavailable'


class TestDatabaseFailure:
    """Storage errors surface as db_error"""

    def test_missing_tables(self, ordering_config):
        empty = DatabaseManager(":memory:", auto_connect=True)
        try:
            ops = EligibilityOperations(empty, ordering_config, None, lambda: datetime(2025, 3, 10, 10, 0))
            result = resolve(ops, {
                'train': '12345', 'station_code': 'BPL', 'date': '2025-03-10',
                'restro_code': 'R100', 'items': [{'item_id': 1, 'qty': 1}],
            })
            assert result['code'] == 'db_error'
        finally:
            empty.close()
