from datetime import datetime

import pytest

from portal.db.documents import DocumentSnapshot, QuerySnapshot, generate_document_id


@pytest.mark.asyncio
async def test_add_then_get_returns_stripped_data_with_id_and_timestamp(store) -> None:
    ref = await store.collection("courses").add({"name": "CS101", "availableSeats": 10, "faculty": None})

    snapshot = await store.collection("courses").doc(ref.id).get()
    assert snapshot.exists
    data = snapshot.data()
    assert isinstance(data.pop("createdAt"), datetime)
    assert data == {"id": ref.id, "name": "CS101", "availableSeats": 10}


@pytest.mark.asyncio
async def test_add_ids_are_unique(store) -> None:
    courses = store.collection("courses")
    ids = [(await courses.add({"n": i})).id for i in range(200)]
    assert len(set(ids)) == 200


def test_generated_ids_have_time_prefix() -> None:
    doc_id = generate_document_id()
    prefix, millis, rest = doc_id.split("_", 2)
    assert prefix == "mock"
    assert millis.isdigit()
    assert rest


@pytest.mark.asyncio
async def test_unknown_collection_is_empty_not_an_error(store) -> None:
    snapshot = await store.collection("nothing_here").get()
    assert isinstance(snapshot, QuerySnapshot)
    assert snapshot.empty
    assert snapshot.size == 0
    assert "nothing_here" in store.collection_names()


@pytest.mark.asyncio
async def test_get_missing_document(store) -> None:
    snapshot = await store.collection("users").doc("ghost").get()
    assert not snapshot.exists
    assert snapshot.data() is None
    assert snapshot.id == "ghost"


@pytest.mark.asyncio
async def test_doc_without_id_generates_one(store) -> None:
    ref = store.collection("jobs").doc()
    assert ref.id.startswith("mock_")
    await ref.set({"title": "Dev"})
    assert (await ref.get()).exists


@pytest.mark.asyncio
async def test_set_merge_preserves_other_fields(store) -> None:
    ref = store.collection("users").doc("u1")
    await ref.set({"name": "Lineo", "role": "student"})
    await ref.set({"role": "admin"}, merge=True)

    data = (await ref.get()).data()
    assert data["name"] == "Lineo"
    assert data["role"] == "admin"
    assert "updatedAt" in data


@pytest.mark.asyncio
async def test_set_without_merge_replaces_everything_but_id(store) -> None:
    ref = store.collection("users").doc("u1")
    await ref.set({"name": "Lineo", "role": "student"})
    await ref.set({"role": "admin"})

    data = (await ref.get()).data()
    assert data["id"] == "u1"
    assert data["role"] == "admin"
    assert "name" not in data
    assert "createdAt" in data


@pytest.mark.asyncio
async def test_set_on_missing_document_creates_it_in_place(store) -> None:
    await store.collection("users").doc("a").set({"n": 1})
    await store.collection("users").doc("b").set({"n": 2})
    await store.collection("users").doc("a").set({"n": 3})

    snapshot = await store.collection("users").get()
    assert [doc.id for doc in snapshot.docs] == ["a", "b"]


@pytest.mark.asyncio
async def test_update_merges_and_strips_none(store) -> None:
    ref = store.collection("users").doc("u1")
    await ref.set({"name": "Lineo", "phone": "123"})
    await ref.update({"phone": None, "studentType": "college"})

    data = (await ref.get()).data()
    # None in the payload never deletes a stored field
    assert data["phone"] == "123"
    assert data["studentType"] == "college"
    assert "updatedAt" in data


@pytest.mark.asyncio
async def test_update_on_missing_document_is_silent_no_op(store) -> None:
    ref = store.collection("users").doc("ghost")
    await ref.update({"name": "nobody"})
    assert not (await ref.get()).exists


@pytest.mark.asyncio
async def test_update_cannot_change_id(store) -> None:
    ref = store.collection("users").doc("u1")
    await ref.set({"name": "x"})
    await ref.update({"id": "other"})
    assert (await ref.get()).data()["id"] == "u1"


@pytest.mark.asyncio
async def test_delete_is_idempotent(store) -> None:
    ref = store.collection("users").doc("u1")
    await ref.set({"name": "x"})

    await ref.delete()
    assert not (await ref.get()).exists
    await ref.delete()
    assert not (await ref.get()).exists


@pytest.mark.asyncio
async def test_snapshot_data_is_a_copy(store) -> None:
    ref = store.collection("users").doc("u1")
    await ref.set({"tags": ["a"]})

    snapshot = await ref.get()
    snapshot.data()["tags"].append("b")
    assert snapshot.data()["tags"] == ["a"]
    assert (await ref.get()).data()["tags"] == ["a"]


@pytest.mark.asyncio
async def test_where_equality_subset_independent_of_write_order(store) -> None:
    users = store.collection("users")
    for i, status in enumerate(["active", "inactive", "active", "pending", "active"]):
        await users.doc(f"u{i}").set({"status": status})

    snapshot = await users.where("status", "==", "active").get()
    assert sorted(doc.id for doc in snapshot.docs) == ["u0", "u2", "u4"]
    assert snapshot.size == len(snapshot.docs) == 3
    assert all(doc.exists for doc in snapshot.docs)


@pytest.mark.asyncio
async def test_where_chain_with_limit(store) -> None:
    jobs = store.collection("jobs")
    for i in range(5):
        await jobs.add({"companyId": "c1", "status": "open", "n": i})
    await jobs.add({"companyId": "c2", "status": "open"})
    await jobs.add({"companyId": "c1", "status": "closed"})

    snapshot = await jobs.where("companyId", "==", "c1").where("status", "==", "open").limit(2).get()
    assert snapshot.size == 2
    for doc in snapshot.docs:
        assert doc.get("companyId") == "c1"
        assert doc.get("status") == "open"


@pytest.mark.asyncio
async def test_in_and_array_contains(store) -> None:
    jobs = store.collection("jobs")
    await jobs.doc("j1").set({"status": "active", "skills": ["Python", "SQL"]})
    await jobs.doc("j2").set({"status": "closed", "skills": ["Java"]})
    await jobs.doc("j3").set({"status": "draft"})

    in_snapshot = await jobs.where("status", "in", ["active", "closed"]).get()
    assert [doc.id for doc in in_snapshot] == ["j1", "j2"]

    contains_snapshot = await jobs.where("skills", "array-contains", "Python").get()
    assert [doc.id for doc in contains_snapshot] == ["j1"]


@pytest.mark.asyncio
async def test_unknown_operator_passes_everything_through(store) -> None:
    jobs = store.collection("jobs")
    await jobs.doc("j1").set({"seats": 1})
    await jobs.doc("j2").set({"seats": 50})

    snapshot = await jobs.where("seats", ">", 10).get()
    assert snapshot.size == 2


@pytest.mark.asyncio
async def test_order_by_created_at_desc(store) -> None:
    courses = store.collection("courses")
    for i in range(5):
        await courses.add({"n": i})

    snapshot = await courses.order_by("createdAt", "desc").get()
    stamps = [doc.get("createdAt") for doc in snapshot.docs]
    assert all(a >= b for a, b in zip(stamps, stamps[1:]))


@pytest.mark.asyncio
async def test_order_by_camel_case_alias_and_where_after_order(store) -> None:
    courses = store.collection("courses")
    await courses.doc("a").set({"institutionId": "i1", "seats": 30})
    await courses.doc("b").set({"institutionId": "i2", "seats": 10})
    await courses.doc("c").set({"institutionId": "i1", "seats": 20})

    snapshot = await courses.orderBy("seats").where("institutionId", "==", "i1").get()
    assert [doc.id for doc in snapshot.docs] == ["c", "a"]


@pytest.mark.asyncio
async def test_second_order_by_replaces_first(store) -> None:
    courses = store.collection("courses")
    await courses.doc("a").set({"x": 1, "y": 2})
    await courses.doc("b").set({"x": 2, "y": 1})

    snapshot = await courses.order_by("x").order_by("y").get()
    assert [doc.id for doc in snapshot.docs] == ["b", "a"]


@pytest.mark.asyncio
async def test_order_by_missing_field_drifts(store) -> None:
    # documents without the sort field sort as "smaller" than any value
    courses = store.collection("courses")
    await courses.doc("has").set({"rank": 1})
    await courses.doc("lacks").set({"name": "x"})

    asc = await courses.order_by("rank").get()
    desc = await courses.order_by("rank", "desc").get()
    assert [doc.id for doc in asc] == ["lacks", "has"]
    assert [doc.id for doc in desc] == ["has", "lacks"]


@pytest.mark.asyncio
async def test_collection_limit_truncates_in_insertion_order(store) -> None:
    courses = store.collection("courses")
    for doc_id in ["a", "b", "c"]:
        await courses.doc(doc_id).set({})

    snapshot = await courses.limit(2).get()
    assert [doc.id for doc in snapshot.docs] == ["a", "b"]
    assert (await courses.limit(0).get()).empty


@pytest.mark.asyncio
async def test_query_is_evaluated_at_execution_time(store) -> None:
    users = store.collection("users")
    query = users.where("role", "==", "student")
    await users.add({"role": "student"})

    snapshot = await query.get()
    assert snapshot.size == 1


def test_query_chaining_returns_new_objects(store) -> None:
    base = store.collection("users").where("role", "==", "student")
    narrowed = base.where("status", "==", "active")
    assert len(base.filters) == 1
    assert len(narrowed.filters) == 2


@pytest.mark.asyncio
async def test_snapshot_for_each_and_iteration(store) -> None:
    users = store.collection("users")
    await users.doc("a").set({})
    await users.doc("b").set({})

    snapshot = await users.get()
    seen = []
    snapshot.forEach(lambda doc: seen.append(doc.id))
    assert seen == ["a", "b"]
    assert [doc.id for doc in snapshot] == ["a", "b"]
    assert len(snapshot) == 2
    assert all(isinstance(doc, DocumentSnapshot) for doc in snapshot)


@pytest.mark.asyncio
async def test_seed_keeps_given_ids(store) -> None:
    store.seed("institution", [{"id": "inst1", "name": "NUL", "email": None}])
    snapshot = await store.collection("institution").doc("inst1").get()
    assert snapshot.data() == {"id": "inst1", "name": "NUL"}


@pytest.mark.asyncio
async def test_seed_skips_documents_without_id(store) -> None:
    store.seed("institution", [{"name": "No id"}, {"id": None, "name": "Null id"}, {"id": "inst1"}])

    snapshot = await store.collection("institution").get()
    assert [doc.id for doc in snapshot.docs] == ["inst1"]
    assert (await store.collection("institution").where("name", "==", "No id").get()).empty
