"""GraphQL query tests."""

from __future__ import annotations

from bson import ObjectId

ME = "query { me { _id firstName lastName email status } }"

GET_USER = """
query GetUser($input: GetUserInput!) {
  getUser(input: $input) { _id email firstName }
}
"""

GET_USERS = """
query GetUsers($input: PaginateUserInput) {
  getUsers(input: $input) {
    docs { _id email }
    totalDocs limit page totalPages hasPrevPage hasNextPage
    prevPage nextPage offset pagingCounter
  }
}
"""


async def test_hello(execute):
    result = await execute("query { hello }")

    assert result.errors is None
    assert result.data == {"hello": "Hello World!"}


async def test_me(execute, user):
    result = await execute(ME, user=user)

    assert result.errors is None
    assert result.data["me"] == {
        "_id": user.id,
        "firstName": "Alice",
        "lastName": "Smith",
        "email": "alice@example.com",
        "status": "ACTIVE",
    }


async def test_me_requires_authentication(execute):
    result = await execute(ME)

    assert result.data is None
    assert result.errors[0].message == "Authentication required"
    assert result.errors[0].extensions["code"] == "UNAUTHENTICATED"


async def test_get_user(execute, user):
    result = await execute(GET_USER, {"input": {"_id": user.id}}, user=user)

    assert result.errors is None
    assert result.data["getUser"]["email"] == "alice@example.com"


async def test_get_user_not_found(execute, user):
    result = await execute(GET_USER, {"input": {"_id": str(ObjectId())}}, user=user)

    assert result.errors[0].extensions["code"] == "NOT_FOUND"
    assert result.errors[0].message == "User not found"


async def test_get_user_invalid_id(execute, user):
    result = await execute(GET_USER, {"input": {"_id": "nope"}}, user=user)

    assert result.errors[0].extensions["code"] == "BAD_USER_INPUT"


async def test_get_users_pagination(execute, services, user):
    result = await execute(GET_USERS, {"input": {"search": "ALI", "page": 1, "limit": 5}}, user=user)

    assert result.errors is None
    page = result.data["getUsers"]
    assert page["docs"] == [{"_id": user.id, "email": "alice@example.com"}]
    assert page["totalDocs"] == 1
    assert page["totalPages"] == 1
    assert page["pagingCounter"] == 1
    assert page["hasNextPage"] is False
    assert page["nextPage"] is None


async def test_get_users_limit_is_validated(execute, user):
    result = await execute(GET_USERS, {"input": {"limit": 500}}, user=user)

    assert result.errors[0].extensions["code"] == "BAD_USER_INPUT"
    assert result.errors[0].extensions["errors"][0]["field"] == "limit"

