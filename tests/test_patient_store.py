import threading
import unittest
from datetime import date

from records import Patient, PatientStore


def make_patient(patient_id: str, mrn: str, first: str = "Ada", last: str = "Lovelace", status: str = "ACTIVE") -> Patient:
    return Patient(
        id=patient_id,
        first_name=first,
        last_name=last,
        date_of_birth=date(1980, 5, 17),
        phone="555-0100",
        email=f"{patient_id}@example.com",
        mrn=mrn,
        status=status,
    )


class PatientStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = PatientStore()

    def test_find_by_id_and_mrn_return_latest_save(self) -> None:
        first = make_patient("p-1", "M-1")
        self.store.save(first)
        replaced = make_patient("p-1", "M-1", status="INACTIVE")
        self.store.save(replaced)
        self.store.save(make_patient("p-2", "M-2"))

        self.assertEqual(self.store.find_by_id("p-1"), replaced)
        self.assertEqual(self.store.find_by_mrn("M-1"), replaced)
        self.assertEqual(self.store.find_by_mrn("M-2").id, "p-2")

    def test_lookups_return_none_when_absent(self) -> None:
        self.assertIsNone(self.store.find_by_id("missing"))
        self.assertIsNone(self.store.find_by_mrn("missing"))

    def test_find_by_mrn_is_case_sensitive(self) -> None:
        self.store.save(make_patient("p-1", "M-abc"))

        self.assertIsNone(self.store.find_by_mrn("m-ABC"))
        self.assertIsNotNone(self.store.find_by_mrn("M-abc"))

    def test_delete_removes_record_and_mrn_index(self) -> None:
        self.store.save(make_patient("p-1", "M-1"))

        self.store.delete("p-1")

        self.assertIsNone(self.store.find_by_id("p-1"))
        self.assertIsNone(self.store.find_by_mrn("M-1"))
        self.assertEqual(self.store.count(), 0)

    def test_delete_unknown_is_noop(self) -> None:
        self.store.save(make_patient("p-1", "M-1"))

        self.store.delete("other")

        self.assertEqual(self.store.count(), 1)

    def test_save_with_new_mrn_drops_stale_index_entry(self) -> None:
        self.store.save(make_patient("p-1", "M-1"))
        self.store.save(make_patient("p-1", "M-2"))

        self.assertIsNone(self.store.find_by_mrn("M-1"))
        self.assertEqual(self.store.find_by_mrn("M-2").id, "p-1")
        self.assertEqual(self.store.count(), 1)

    def test_save_with_new_mrn_keeps_index_owned_by_other_patient(self) -> None:
        self.store.save(make_patient("p-1", "M-1"))
        self.store.save(make_patient("p-2", "M-1"))
        self.store.save(make_patient("p-1", "M-9"))

        self.assertEqual(self.store.find_by_mrn("M-1").id, "p-2")
        self.assertEqual(self.store.find_by_mrn("M-9").id, "p-1")

    def test_save_does_not_enforce_mrn_uniqueness(self) -> None:
        self.store.save(make_patient("p-1", "M-1"))
        self.store.save(make_patient("p-2", "M-1"))

        self.assertEqual(self.store.count(), 2)
        self.assertEqual(self.store.find_by_mrn("M-1").id, "p-2")

    def test_save_if_mrn_absent_rejects_duplicate(self) -> None:
        self.assertTrue(self.store.save_if_mrn_absent(make_patient("p-1", "M-1")))
        self.assertFalse(self.store.save_if_mrn_absent(make_patient("p-2", "M-1")))

        self.assertIsNone(self.store.find_by_id("p-2"))
        self.assertEqual(self.store.find_by_mrn("M-1").id, "p-1")

    def test_save_if_mrn_absent_allows_reuse_after_delete(self) -> None:
        self.store.save_if_mrn_absent(make_patient("p-1", "M-1"))
        self.store.delete("p-1")

        self.assertTrue(self.store.save_if_mrn_absent(make_patient("p-2", "M-1")))
        self.assertEqual(self.store.find_by_mrn("M-1").id, "p-2")

    def test_concurrent_registration_with_same_mrn_admits_one(self) -> None:
        results = []
        lock = threading.Lock()
        start = threading.Barrier(16)

        def register(index: int) -> None:
            start.wait()
            accepted = self.store.save_if_mrn_absent(make_patient(f"p-{index}", "M-RACE"))
            with lock:
                results.append(accepted)

        workers = [threading.Thread(target=register, args=(i,)) for i in range(16)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        self.assertEqual(results.count(True), 1)
        self.assertEqual(self.store.count(), 1)

    def test_search_without_filters_sorts_by_last_then_first(self) -> None:
        self.store.save(make_patient("p-1", "M-1", first="Zoe", last="Smith"))
        self.store.save(make_patient("p-2", "M-2", first="Alan", last="Turing"))
        self.store.save(make_patient("p-3", "M-3", first="Adam", last="Smith"))

        names = [(p.last_name, p.first_name) for p in self.store.search("", "")]

        self.assertEqual(names, [("Smith", "Adam"), ("Smith", "Zoe"), ("Turing", "Alan")])

    def test_search_ordering_is_case_sensitive(self) -> None:
        self.store.save(make_patient("p-1", "M-1", last="adams"))
        self.store.save(make_patient("p-2", "M-2", last="Baker"))

        self.assertEqual([p.last_name for p in self.store.search()], ["Baker", "adams"])

    def test_search_combines_query_and_status(self) -> None:
        self.store.save(make_patient("p-1", "M-1", first="John", last="Smith"))
        self.store.save(make_patient("p-2", "M-2", first="Jane", last="Smithers", status="INACTIVE"))
        self.store.save(make_patient("p-3", "SMITH-9", first="Mary", last="Jones"))
        self.store.save(make_patient("p-4", "M-4", first="Alan", last="Turing"))

        matches = self.store.search("smith", "active")

        self.assertEqual([p.id for p in matches], ["p-3", "p-1"])

    def test_search_matches_across_full_name(self) -> None:
        self.store.save(make_patient("p-1", "M-1", first="John", last="Smith"))

        self.assertEqual(len(self.store.search("JOHN SM", "")), 1)
        self.assertEqual(self.store.search("johnsmith", ""), [])

    def test_search_status_only(self) -> None:
        self.store.save(make_patient("p-1", "M-1", status="ACTIVE"))
        self.store.save(make_patient("p-2", "M-2", status="INACTIVE"))

        self.assertEqual([p.id for p in self.store.search("", "Inactive")], ["p-2"])


if __name__ == "__main__":
    unittest.main()
