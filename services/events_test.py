import unittest
from unittest.mock import MagicMock, patch
from datetime import datetime, timezone
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from models.enums import EventType
from models.events import EventCreate
from services.events import create_event


@patch('services.events.find_experiment', return_value=object())
class TestCreateEvent(unittest.TestCase):

    def setUp(self):
        self.mock_db = MagicMock()

    def test_lifts_experiment_and_variant_from_properties(self, mock_find):
        event_data = EventCreate(
            user_id="user_1",
            event_type=EventType.CONVERSION,
            properties={"experimentId": "exp_1", "variant": "B", "value": 49.99},
        )

        event = create_event(self.mock_db, "tenant-1", event_data)

        self.assertEqual(event.tenant_id, "tenant-1")
        self.assertEqual(event.experiment_id, "exp_1")
        self.assertEqual(event.variant, "B")
        self.assertEqual(event.properties["value"], 49.99)
        mock_find.assert_called_once_with(self.mock_db, "tenant-1", "exp_1")
        self.mock_db.add.assert_called_once_with(event)
        self.mock_db.commit.assert_called_once()

    def test_untied_event_has_no_experiment(self, mock_find):
        event = create_event(self.mock_db, "tenant-1", EventCreate(user_id="u", event_type="PAGE_VIEW"))

        self.assertIsNone(event.experiment_id)
        self.assertIsNone(event.variant)
        self.assertEqual(event.properties, {})
        mock_find.assert_not_called()

    def test_timestamp_defaults_to_now(self, mock_find):
        before = datetime.now(timezone.utc)
        event = create_event(self.mock_db, "tenant-1", EventCreate(user_id="u", event_type="CLICK"))
        self.assertGreaterEqual(event.timestamp, before)

    def test_keeps_given_timestamp_in_utc(self, mock_find):
        event_data = EventCreate(userId="u", eventType="CLICK", timestamp="2025-01-15T12:00:00+02:00")
        event = create_event(self.mock_db, "tenant-1", event_data)
        self.assertEqual(event.timestamp, datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc))

    def test_unknown_experiment_is_rejected(self, mock_find):
        mock_find.return_value = None
        event_data = EventCreate(user_id="u", event_type="CLICK", properties={"experimentId": "other"})

        with self.assertRaises(HTTPException) as ctx:
            create_event(self.mock_db, "tenant-1", event_data)

        self.assertEqual(ctx.exception.status_code, 400)
        self.mock_db.add.assert_not_called()

    def test_rolls_back_on_database_error(self, mock_find):
        self.mock_db.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))

        with self.assertRaises(OperationalError):
            create_event(self.mock_db, "tenant-1", EventCreate(user_id="u", event_type="CLICK"))

        self.mock_db.rollback.assert_called_once()


class TestEventCreateValidation(unittest.TestCase):

    def test_rejects_unknown_event_type(self):
        with self.assertRaises(ValueError):
            EventCreate(user_id="u", event_type="INVALID_TYPE")

    def test_rejects_missing_user(self):
        with self.assertRaises(ValueError):
            EventCreate(event_type="CLICK")


if __name__ == '__main__':
    unittest.main()
