# Order draft storage tests

PAYLOAD = {
    'journey': {'train_number': '12345', 'boarding_station_code': 'NDLS', 'journey_date': '2025-03-10'},
    'outlet': {'restro_code': 'R100', 'station_code': 'BPL'},
    'cart': [{'item_id': 1, 'name': 'Veg Thali', 'price': 250.0, 'qty': 1}],
}


class TestDraftOperations:
    """Draft lifecycle"""

    def test_create_and_get(self, draft_ops):
        draft = draft_ops.create_draft(PAYLOAD)

        assert len(draft['draft_id']) == 32
        assert draft['payload'] == PAYLOAD
        assert draft_ops.get_draft(draft['draft_id'])['payload'] == PAYLOAD

    def test_ids_are_unique(self, draft_ops):
        assert draft_ops.create_draft(PAYLOAD)['draft_id'] != draft_ops.create_draft(PAYLOAD)['draft_id']

    def test_update_replaces_payload(self, draft_ops):
        draft_id = draft_ops.create_draft(PAYLOAD)['draft_id']

        updated = draft_ops.update_draft(draft_id, {'cart': []})

        assert updated['payload'] == {'cart': []}
        assert draft_ops.get_draft(draft_id)['payload'] == {'cart': []}

    def test_update_missing(self, draft_ops):
        assert draft_ops.update_draft('missing', PAYLOAD) is None

    def test_delete(self, draft_ops):
        draft_id = draft_ops.create_draft(PAYLOAD)['draft_id']

        assert draft_ops.delete_draft(draft_id) is True
        assert draft_ops.get_draft(draft_id) is None
        assert draft_ops.delete_draft(draft_id) is False
