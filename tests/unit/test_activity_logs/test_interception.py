"""Tests for write interception on tracked collections."""

from __future__ import annotations

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from account_service.core.context import RequestContext, RequestUser, bind_request_context
from account_service.core.settings import ActivityLogSettings
from account_service.features.activity_logs import (
    ActivityLogRecorder,
    ActivityLogRepository,
    ActivityLogTracker,
    TrackedCollection,
)
from account_service.features.activity_logs.interception import (
    requested_changes,
    touched_keys,
    upsert_seed,
)
from tests.fakes import FakeDatabase

ACTOR_ID = "64b7f0c2e4b0a1a2b3c4d5e6"


@pytest.fixture
async def alice(tracked_users, recorder):
    result = await tracked_users.insert_one(
        {"firstName": "Alice", "lastName": "Smith", "email": "alice@example.com", "updatedAt": 1}
    )
    await recorder.drain()
    return result.inserted_id


def last_log(activity_logs):
    return activity_logs.documents[-1]


class TestUpdateHelpers:
    def test_touched_keys_cover_plain_and_operator_keys(self):
        update = {"$set": {"firstName": "Bob"}, "$unset": {"phone": ""}, "$inc": {"logins": 1}}

        assert touched_keys(update) == ["firstName", "phone", "logins"]

    def test_touched_keys_ignore_id(self):
        assert touched_keys({"_id": 1, "name": "x"}) == ["name"]

    def test_requested_changes(self):
        update = {"$set": {"firstName": "Bob", "_id": 5}, "$unset": {"phone": ""}, "$inc": {"n": 1}}

        assert requested_changes(update) == {"firstName": "Bob", "phone": None}


class TestTrack:
    def test_track_is_idempotent_per_collection(self, tracker, db):
        assert tracker.track(db["users"]) is tracker.track(db["users"])

    def test_tracking_a_tracked_collection_returns_it(self, tracker, tracked_users):
        assert tracker.track(tracked_users) is tracked_users

    def test_reads_pass_through(self, tracked_users, db):
        assert isinstance(tracked_users, TrackedCollection)
        assert tracked_users.name == "users"
        assert tracked_users.count_documents == db["users"].count_documents


class TestCreate:
    async def test_insert_one_records_create(self, tracked_users, recorder, activity_logs):
        context = RequestContext(body={"variables": {"input": {"firstName": "Alice"}}}, user=RequestUser(ACTOR_ID))
        with bind_request_context(context):
            result = await tracked_users.insert_one({"firstName": "Alice"})
        await recorder.drain()

        log = last_log(activity_logs)
        assert log["action"] == "CREATE"
        assert log["documentId"] == result.inserted_id
        assert log["user"] == ObjectId(ACTOR_ID)
        assert log["changes"] == {
            "before": {},
            "after": {"firstName": "Alice", "_id": result.inserted_id},
        }
        assert log["changeSource"] == "document"

    async def test_later_edits_by_the_caller_do_not_reach_the_record(
        self, tracked_users, recorder, activity_logs,
    ):
        document = {"firstName": "Alice", "address": {"city": "Oslo"}}

        await tracked_users.insert_one(document)
        document["address"]["city"] = "Bergen"
        document["firstName"] = "Eve"
        await recorder.drain()

        after = last_log(activity_logs)["changes"]["after"]
        assert after["address"] == {"city": "Oslo"}
        assert after["firstName"] == "Alice"

    async def test_save_without_id_inserts(self, tracked_users, recorder, activity_logs, db):
        saved = await tracked_users.save({"firstName": "Carol"})
        await recorder.drain()

        assert "_id" in saved
        assert db["users"].documents[0]["firstName"] == "Carol"
        assert last_log(activity_logs)["action"] == "CREATE"

    async def test_save_with_new_id_upserts_as_create(self, tracked_users, recorder, activity_logs):
        oid = ObjectId()

        await tracked_users.save({"_id": oid, "firstName": "Dan"})
        await recorder.drain()

        log = last_log(activity_logs)
        assert log["action"] == "CREATE"
        assert log["documentId"] == oid


class TestUpdate:
    async def test_update_one_records_minimal_diff(self, tracked_users, recorder, activity_logs, alice):
        actor = RequestContext(
            body={"variables": {"input": {"_id": str(alice), "firstName": "Bob"}}},
            user=RequestUser(ACTOR_ID),
        )
        with bind_request_context(actor):
            result = await tracked_users.update_one(
                {"_id": alice}, {"$set": {"firstName": "Bob", "updatedAt": 2}},
            )
        await recorder.drain()

        assert result.matched_count == 1
        log = last_log(activity_logs)
        assert log["action"] == "UPDATE"
        assert log["documentId"] == alice
        assert log["user"] == ObjectId(ACTOR_ID)
        assert log["changes"] == {"before": {"firstName": "Alice"}, "after": {"firstName": "Bob"}}
        assert log["payload"] == {"input": {"_id": str(alice), "firstName": "Bob"}}

    async def test_update_snapshot_reads_only_touched_fields(self, tracked_users, db, alice):
        calls = []
        original = db["users"].find_one

        async def spy(filter=None, projection=None, *args, **kwargs):
            calls.append(projection)
            return await original(filter, projection, *args, **kwargs)

        db["users"].find_one = spy
        await tracked_users.update_one({"_id": alice}, {"$set": {"firstName": "Bob"}})

        assert calls == [{"firstName": 1, "updatedAt": 1}]

    async def test_find_one_and_update_after(self, tracked_users, recorder, activity_logs, alice):
        document = await tracked_users.find_one_and_update(
            {"_id": alice},
            {"$set": {"lastName": "Jones"}, "$inc": {"logins": 1}},
            return_document=ReturnDocument.AFTER,
        )
        await recorder.drain()

        assert document["lastName"] == "Jones"
        assert last_log(activity_logs)["changes"] == {
            "before": {"lastName": "Smith"},
            "after": {"logins": 1, "lastName": "Jones"},
        }

    async def test_unset_is_reported_as_none(self, tracked_users, recorder, activity_logs, alice):
        await tracked_users.update_one({"_id": alice}, {"$unset": {"lastName": ""}})
        await recorder.drain()

        assert last_log(activity_logs)["changes"] == {
            "before": {"lastName": "Smith"},
            "after": {"lastName": None},
        }

    async def test_update_without_match_records_nothing(self, tracked_users, recorder, activity_logs, alice):
        before = len(activity_logs.documents)

        result = await tracked_users.update_one({"_id": ObjectId()}, {"$set": {"firstName": "X"}})
        await recorder.drain()

        assert result.matched_count == 0
        assert len(activity_logs.documents) == before

    async def test_upsert_records_create(self, tracked_users, recorder, activity_logs):
        result = await tracked_users.update_one(
            {"email": "new@example.com"}, {"$set": {"firstName": "New"}}, upsert=True,
        )
        await recorder.drain()

        log = last_log(activity_logs)
        assert log["action"] == "CREATE"
        assert log["documentId"] == result.upserted_id
        assert log["changes"] == {
            "before": {},
            "after": {"email": "new@example.com", "_id": result.upserted_id, "firstName": "New"},
        }

    async def test_unreadable_upsert_records_filter_and_update_values(
        self, tracked_users, recorder, activity_logs, db,
    ):
        async def failing_find_one(*args, **kwargs):
            raise PyMongoError("read failed")

        db["users"].find_one = failing_find_one
        result = await tracked_users.update_one(
            {"email": "new@example.com", "age": {"$gt": 1}},
            {"$set": {"firstName": "New"}, "$setOnInsert": {"status": "PENDING"}},
            upsert=True,
        )
        await recorder.drain()

        assert last_log(activity_logs)["changes"]["after"] == {
            "email": "new@example.com",
            "status": "PENDING",
            "firstName": "New",
            "_id": result.upserted_id,
        }

    def test_upsert_seed_keeps_equality_fields_only(self):
        seed = upsert_seed(
            {"email": "a@b.co", "age": {"$gt": 1}, "$or": [{"x": 1}], "profile": {"city": "Oslo"}},
            {"$set": {"firstName": "A"}},
        )

        assert seed == {"email": "a@b.co", "profile": {"city": "Oslo"}, "firstName": "A"}

    async def test_find_one_and_update_upsert_before_records_created_document(
        self, tracked_users, recorder, activity_logs, db,
    ):
        returned = await tracked_users.find_one_and_update(
            {"email": "new@example.com"}, {"$set": {"firstName": "New"}}, upsert=True,
        )
        await recorder.drain()

        stored = db["users"].documents[-1]
        log = last_log(activity_logs)
        assert returned is None
        assert log["action"] == "CREATE"
        assert log["documentId"] == stored["_id"]
        assert log["changes"]["after"] == stored

    async def test_failed_snapshot_falls_back_to_requested_values(
        self, tracked_users, recorder, activity_logs, db, alice,
    ):
        db["users"].fail_next["find_one"] = PyMongoError("read failed")

        await tracked_users.update_one({"_id": alice}, {"$set": {"firstName": "Bob"}})
        await recorder.drain()

        log = last_log(activity_logs)
        assert log["changes"] == {"before": {}, "after": {"firstName": "Bob"}}
        assert log["changeSource"] == "requested"

    async def test_noop_update_records_nothing(self, tracked_users, recorder, activity_logs, alice):
        before = len(activity_logs.documents)

        await tracked_users.update_one({"_id": alice}, {"$set": {"firstName": "Alice"}})
        await recorder.drain()

        assert len(activity_logs.documents) == before

    async def test_pipeline_update_passes_through_unaudited(self, tracked_users, db, alice):
        db["users"].update_one = _pipeline_update_stub

        result = await tracked_users.update_one({"_id": alice}, [{"$set": {"a": 1}}])

        assert result == "pipeline"
        assert "find_one" not in db["users"].calls


async def _pipeline_update_stub(filter, update, upsert=False, **kwargs):
    return "pipeline"


class TestReplace:
    async def test_replace_reports_dropped_fields(self, tracked_users, recorder, activity_logs, alice):
        await tracked_users.replace_one(
            {"_id": alice}, {"firstName": "Alice", "email": "alice@example.com", "updatedAt": 2},
        )
        await recorder.drain()

        assert last_log(activity_logs)["changes"] == {
            "before": {"lastName": "Smith"},
            "after": {},
        }

    async def test_save_existing_document_records_update(self, tracked_users, recorder, activity_logs, alice):
        await tracked_users.save(
            {"_id": alice, "firstName": "Alicia", "lastName": "Smith", "email": "alice@example.com"},
        )
        await recorder.drain()

        log = last_log(activity_logs)
        assert log["action"] == "UPDATE"
        assert log["changes"] == {"before": {"firstName": "Alice"}, "after": {"firstName": "Alicia"}}

    async def test_find_one_and_replace(self, tracked_users, recorder, activity_logs, alice):
        await tracked_users.find_one_and_replace(
            {"_id": alice},
            {"firstName": "Alice", "lastName": "Brown", "email": "alice@example.com", "updatedAt": 1},
        )
        await recorder.drain()

        assert last_log(activity_logs)["changes"] == {
            "before": {"lastName": "Smith"},
            "after": {"lastName": "Brown"},
        }


class TestDelete:
    async def test_delete_one_records_full_document(self, tracked_users, recorder, activity_logs, alice):
        result = await tracked_users.delete_one({"_id": alice})
        await recorder.drain()

        assert result.deleted_count == 1
        log = last_log(activity_logs)
        assert log["action"] == "DELETE"
        assert log["documentId"] == alice
        assert log["changes"]["before"]["firstName"] == "Alice"
        assert log["changes"]["after"] == {}

    async def test_find_one_and_delete(self, tracked_users, recorder, activity_logs, alice):
        document = await tracked_users.find_one_and_delete({"_id": alice})
        await recorder.drain()

        assert document["_id"] == alice
        log = last_log(activity_logs)
        assert log["action"] == "DELETE"
        assert log["changes"]["before"]["email"] == "alice@example.com"

    async def test_delete_without_match_records_nothing(self, tracked_users, recorder, activity_logs, alice):
        before = len(activity_logs.documents)

        await tracked_users.delete_one({"_id": ObjectId()})
        await recorder.drain()

        assert len(activity_logs.documents) == before


class TestFailureIsolation:
    async def test_driver_errors_propagate_unchanged(self, tracked_users, tracker, db, alice):
        error = DuplicateKeyError("E11000", 11000)
        db["users"].fail_next["update_one"] = error

        with pytest.raises(DuplicateKeyError) as excinfo:
            await tracked_users.update_one({"_id": alice}, {"$set": {"firstName": "Bob"}})

        assert excinfo.value is error
        assert len(tracker.cache) == 0

    async def test_sink_failure_never_breaks_the_write(self, tracked_users, recorder, activity_logs, db, alice):
        activity_logs.fail_next["insert_one"] = PyMongoError("audit store down")

        result = await tracked_users.update_one({"_id": alice}, {"$set": {"firstName": "Bob"}})
        await recorder.drain()

        assert result.modified_count == 1
        assert db["users"].documents[0]["firstName"] == "Bob"

    async def test_refresh_requests_are_not_audited(self, tracked_users, recorder, activity_logs, alice):
        before = len(activity_logs.documents)
        context = RequestContext(body={"variables": {"refreshTokenInput": {"refreshToken": "t"}}})

        with bind_request_context(context):
            await tracked_users.update_one({"_id": alice}, {"$set": {"lastActiveAt": 5}})
        await recorder.drain()

        assert len(activity_logs.documents) == before

    async def test_snapshot_cache_is_empty_after_writes(self, tracked_users, tracker, alice):
        await tracked_users.update_one({"_id": alice}, {"$set": {"firstName": "Bob"}})
        await tracked_users.delete_one({"_id": alice})

        assert len(tracker.cache) == 0


class TestDisabled:
    async def test_disabled_tracking_is_a_plain_passthrough(self):
        db = FakeDatabase()
        recorder = ActivityLogRecorder(
            ActivityLogRepository(db["activitylogs"]), ActivityLogSettings(enabled=False),
        )
        users = ActivityLogTracker(recorder).track(db["users"])

        await users.insert_one({"firstName": "Alice"})
        await users.update_one({"firstName": "Alice"}, {"$set": {"firstName": "Bob"}})
        await recorder.drain()

        assert db["activitylogs"].documents == []
        assert db["users"].calls == ["insert_one", "update_one"]
