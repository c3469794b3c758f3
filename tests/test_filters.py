from portal.db.documents import FieldFilter
from portal.db.filters import evaluate_condition, matches_all, sort_records


def test_equality() -> None:
    assert evaluate_condition({"status": "active"}, "status", "==", "active")
    assert not evaluate_condition({"status": "closed"}, "status", "==", "active")
    assert not evaluate_condition({}, "status", "==", "active")


def test_in_requires_a_list_argument() -> None:
    data = {"status": "active"}
    assert evaluate_condition(data, "status", "in", ["active", "pending"])
    assert not evaluate_condition(data, "status", "in", ["closed"])
    assert not evaluate_condition(data, "status", "in", "active")


def test_array_contains() -> None:
    data = {"skills": ["Python", "SQL"], "name": "Python"}
    assert evaluate_condition(data, "skills", "array-contains", "SQL")
    assert not evaluate_condition(data, "skills", "array-contains", "Java")
    # stored field must itself be a list
    assert not evaluate_condition(data, "name", "array-contains", "Python")


def test_unknown_operator_matches_everything() -> None:
    assert evaluate_condition({"seats": 1}, "seats", ">=", 100)
    assert evaluate_condition({}, "anything", "not-an-op", None)


def test_matches_all_is_a_conjunction() -> None:
    data = {"companyId": "c1", "status": "active"}
    assert matches_all(data, [FieldFilter("companyId", "==", "c1"), FieldFilter("status", "==", "active")])
    assert not matches_all(data, [FieldFilter("companyId", "==", "c1"), FieldFilter("status", "==", "closed")])
    assert matches_all(data, [])


def test_sort_ascending_and_descending() -> None:
    records = [{"n": 2}, {"n": 3}, {"n": 1}]
    assert [r["n"] for r in sort_records(records, "n")] == [1, 2, 3]
    assert [r["n"] for r in sort_records(records, "n", "desc")] == [3, 2, 1]


def test_missing_fields_drift_to_start_ascending_and_end_descending() -> None:
    records = [{"id": "a", "n": 2}, {"id": "b"}, {"id": "c", "n": 1}]
    assert [r["id"] for r in sort_records(records, "n", "asc")] == ["b", "c", "a"]
    assert [r["id"] for r in sort_records(records, "n", "desc")] == ["a", "c", "b"]


def test_incomparable_values_do_not_raise() -> None:
    records = [{"id": "a", "v": "text"}, {"id": "b", "v": 3}]
    assert [r["id"] for r in sort_records(records, "v")] == ["a", "b"]


def test_sort_is_stable_for_ties() -> None:
    records = [{"id": "a", "n": 1}, {"id": "b", "n": 1}, {"id": "c", "n": 0}]
    assert [r["id"] for r in sort_records(records, "n")] == ["c", "a", "b"]
    assert [r["id"] for r in sort_records(records, "n", "desc")] == ["a", "b", "c"]
