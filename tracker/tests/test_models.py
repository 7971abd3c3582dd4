import unittest

from tracker.models import (
    INT_MAX,
    INT_MIN,
    Reward,
    StateRecord,
    Task,
    coerce_int,
    coerce_records,
)


class CoerceIntTests(unittest.TestCase):
    def test_numbers_and_numeric_strings(self):
        self.assertEqual(coerce_int(5), 5)
        self.assertEqual(coerce_int(-3), -3)
        self.assertEqual(coerce_int(2.9), 2)
        self.assertEqual(coerce_int("7"), 7)
        self.assertEqual(coerce_int(" 4.5 "), 4)
        self.assertEqual(coerce_int(True), 1)

    def test_out_of_range_values_are_clamped(self):
        self.assertEqual(coerce_int(2**70), INT_MAX)
        self.assertEqual(coerce_int(-(2**70)), INT_MIN)
        self.assertEqual(coerce_int("1e20"), INT_MAX)
        self.assertEqual(coerce_int(-1e20), INT_MIN)
        self.assertEqual(coerce_int(INT_MAX), INT_MAX)

    def test_non_numeric_becomes_zero(self):
        for value in (None, "abc", "", [], {}, float("nan"), float("inf"), "1e400"):
            with self.subTest(value=value):
                self.assertEqual(coerce_int(value), 0)


class RecordTests(unittest.TestCase):
    def test_task_from_dict(self):
        task = Task.from_dict({"name": "Dishes", "points": "5", "extra": 1})
        self.assertEqual(task, Task(name="Dishes", points=5))
        self.assertEqual(task.as_dict(), {"name": "Dishes", "points": 5})

    def test_reward_quantity_defaults_to_zero(self):
        reward = Reward.from_dict({"name": "Movie", "points": 30})
        self.assertEqual(reward.as_dict(), {"name": "Movie", "points": 30, "quantity": 0})

    def test_missing_name_becomes_empty_string(self):
        self.assertEqual(Task.from_dict({"points": 1}).name, "")
        self.assertEqual(Task.from_dict({"name": 12}).name, "12")

    def test_non_mapping_item_becomes_default_record(self):
        self.assertEqual(Task.from_dict("oops"), Task())


class CoerceRecordsTests(unittest.TestCase):
    def test_non_list_payload_is_empty(self):
        for payload in (None, {"name": "x"}, "tasks", 3):
            with self.subTest(payload=payload):
                self.assertEqual(coerce_records(payload, Task), [])

    def test_preserves_order_and_length(self):
        records = coerce_records(
            [{"name": "a", "points": 1}, 42, {"name": "b", "points": "x"}], Task
        )
        self.assertEqual(
            records,
            [Task("a", 1), Task("", 0), Task("b", 0)],
        )

    def test_accepts_record_instances(self):
        records = coerce_records([Reward("r", 2, 1)], Reward)
        self.assertEqual(records, [Reward("r", 2, 1)])


class StateRecordTests(unittest.TestCase):
    def test_default(self):
        self.assertEqual(
            StateRecord.default().as_dict(), {"saldoAnterior": 0, "taskChecks": {}}
        )

    def test_from_dict_applies_defaults(self):
        self.assertEqual(StateRecord.from_dict({}), StateRecord.default())
        self.assertEqual(StateRecord.from_dict([1, 2]), StateRecord.default())
        self.assertEqual(
            StateRecord.from_dict({"saldoAnterior": 3, "taskChecks": "bad"}),
            StateRecord(saldo_anterior=3, task_checks={}),
        )

    def test_task_checks_keys_and_values_are_normalized(self):
        record = StateRecord.from_dict({"taskChecks": {0: 1, "1": False, "2": True}})
        self.assertEqual(record.task_checks, {"0": True, "1": False, "2": True})


if __name__ == "__main__":
    unittest.main()
