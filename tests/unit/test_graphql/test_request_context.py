"""Tests for the request context bound around GraphQL operations."""

from __future__ import annotations

from graphql import parse

from account_service.features.graphql.extensions.request_context import (
    build_request_context,
    root_field_arguments,
)

TWO_OPERATIONS = """
mutation Login { login(input: {email: "a@b.co", password: "x"}) { accessToken } }
mutation Refresh($token: String!) { refreshToken(input: {refreshToken: $token}) { accessToken } }
"""


class TestRootFieldArguments:
    def test_inline_literals_are_resolved(self):
        document = parse('mutation { login(input: {email: "a@b.co", password: "x"}) { accessToken } }')

        fields, arguments = root_field_arguments(document, None, None)

        assert fields == ("login",)
        assert arguments == {"input": {"email": "a@b.co", "password": "x"}}

    def test_variables_are_substituted(self):
        document = parse(TWO_OPERATIONS)

        fields, arguments = root_field_arguments(document, "Refresh", {"token": "t"})

        assert fields == ("refreshToken",)
        assert arguments == {"input": {"refreshToken": "t"}}

    def test_only_the_selected_operation_is_read(self):
        fields, _ = root_field_arguments(parse(TWO_OPERATIONS), "Login", None)

        assert fields == ("login",)

    def test_no_document(self):
        assert root_field_arguments(None, None, None) == ((), {})


class TestBuildRequestContext:
    def test_context_keeps_envelope_and_arguments(self):
        query = "query GetUser { getUser(input: {_id: \"1\"}) { _id } }"

        context = build_request_context(query, "GetUser", None, document=parse(query))

        assert context.body == {"query": query, "operationName": "GetUser"}
        assert context.operation_fields == ("getUser",)
        assert context.arguments == {"input": {"_id": "1"}}
        assert context.user is None
