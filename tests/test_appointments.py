import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import handlers
from records import ClinicRecords, InvalidStatusError, NotFoundError, ValidationError


class AppointmentHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.records = ClinicRecords()
        patient = handlers.create_patient(
            {
                "first_name": "Grace",
                "last_name": "Hopper",
                "date_of_birth": "1906-12-09",
                "mrn": "M-200",
            },
            records=self.records,
        )
        self.patient_id = patient["id"]
        self.start = datetime.now(timezone.utc) + timedelta(days=1)

    def _book(self, when: datetime, provider: str = "provider-1") -> dict:
        return handlers.create_appointment(
            {
                "patient_id": self.patient_id,
                "scheduled_at": when.isoformat(),
                "department": "Oncology",
                "provider": provider,
            },
            records=self.records,
            actor="front-desk",
        )

    def test_create_appointment_success(self) -> None:
        appointment = self._book(self.start)

        self.assertEqual(appointment["patient_id"], self.patient_id)
        self.assertEqual(appointment["status"], "SCHEDULED")
        self.assertEqual(appointment["scheduled_at"], self.start.isoformat())
        event = self.records.audit.latest(1)[0]
        self.assertEqual((event.action, event.entity_type), ("CREATE", "appointment"))
        self.assertEqual(event.actor, "front-desk")
        self.assertEqual(event.metadata, {"patient_id": self.patient_id})

    def test_create_appointment_requires_registered_patient(self) -> None:
        with self.assertRaises(NotFoundError):
            handlers.create_appointment(
                {
                    "patient_id": "unknown",
                    "scheduled_at": self.start.isoformat(),
                    "department": "Oncology",
                    "provider": "provider-1",
                },
                records=self.records,
            )
        self.assertEqual(self.records.appointments.count(), 0)

    def test_create_appointment_validates_fields(self) -> None:
        bad_payloads = [
            {"patient_id": self.patient_id, "scheduled_at": "tomorrow", "department": "x", "provider": "y"},
            {"patient_id": self.patient_id, "scheduled_at": self.start.isoformat(), "department": " ", "provider": "y"},
            {"scheduled_at": self.start.isoformat(), "department": "x", "provider": "y"},
            ["not", "a", "mapping"],
        ]
        for payload in bad_payloads:
            with self.subTest(payload=payload):
                with self.assertRaises(ValidationError):
                    handlers.create_appointment(payload, records=self.records)

    def test_naive_and_zulu_timestamps_are_utc(self) -> None:
        appointment = handlers.create_appointment(
            {
                "patient_id": self.patient_id,
                "scheduled_at": "2026-05-01T10:30:00Z",
                "department": "Oncology",
                "provider": "provider-1",
            },
            records=self.records,
        )
        naive = handlers.create_appointment(
            {
                "patient_id": self.patient_id,
                "scheduled_at": "2026-05-01T11:30:00",
                "department": "Oncology",
                "provider": "provider-1",
            },
            records=self.records,
        )

        self.assertEqual(appointment["scheduled_at"], "2026-05-01T10:30:00+00:00")
        self.assertEqual(naive["scheduled_at"], "2026-05-01T11:30:00+00:00")

    def test_get_patient_schedule_sorted(self) -> None:
        late = self.start + timedelta(hours=2)
        self._book(late)
        self._book(self.start, provider="provider-2")

        schedule = handlers.list_patient_appointments(self.patient_id, records=self.records)

        self.assertEqual(len(schedule), 2)
        self.assertEqual(schedule[0]["scheduled_at"], self.start.isoformat())
        self.assertEqual(schedule[1]["scheduled_at"], late.isoformat())

    def test_list_for_unknown_patient_raises(self) -> None:
        with self.assertRaises(NotFoundError):
            handlers.list_patient_appointments("unknown", records=self.records)

    def test_update_status_to_any_allowed_target(self) -> None:
        appointment = self._book(self.start)

        for target in ("canceled", "SCHEDULED", "Completed", "COMPLETED"):
            updated = handlers.update_appointment_status(appointment["id"], target, records=self.records)
            self.assertEqual(updated["status"], target.upper())

        stored = handlers.get_appointment(appointment["id"], records=self.records)
        self.assertEqual(stored["status"], "COMPLETED")
        self.assertEqual(stored["provider"], "provider-1")

    def test_update_status_rejects_invalid_target(self) -> None:
        appointment = self._book(self.start)
        audit_size = len(self.records.audit)

        with self.assertRaises(InvalidStatusError):
            handlers.update_appointment_status(appointment["id"], "rescheduled", records=self.records)

        stored = handlers.get_appointment(appointment["id"], records=self.records)
        self.assertEqual(stored["status"], "SCHEDULED")
        self.assertEqual(len(self.records.audit), audit_size)

    def test_get_missing_appointment_raises(self) -> None:
        with self.assertRaises(NotFoundError):
            handlers.get_appointment("999", records=self.records)

    def test_concurrent_status_updates_are_last_writer_wins(self) -> None:
        appointment = self._book(self.start)
        stale = self.records.appointments.find_by_id(appointment["id"])

        # A second caller reads the same snapshot before the first one saves.
        with patch.object(self.records.appointments, "find_by_id", return_value=stale):
            handlers.update_appointment_status(appointment["id"], "COMPLETED", records=self.records)
            handlers.update_appointment_status(appointment["id"], "CANCELED", records=self.records)

        self.assertEqual(self.records.appointments.find_by_id(appointment["id"]).status, "CANCELED")
        events = self.records.audit.latest(2)
        self.assertEqual({e.metadata["from"] for e in events}, {"SCHEDULED"})


if __name__ == "__main__":
    unittest.main()
