"""GraphQL test fixtures.

Provides:
- a schema built without error masking
- an ``execute`` helper running operations with a hand-built context
"""

from __future__ import annotations

import pytest

from account_service.features.graphql.context import GraphQLContext
from account_service.features.graphql.schema import create_schema


@pytest.fixture
def schema(graphql_settings):
    return create_schema(graphql_settings, mask_errors=False)


@pytest.fixture
def execute(schema, services):
    """Run an operation as ``user`` (anonymous when None)."""

    async def run(query, variables=None, user=None):
        context = GraphQLContext(services=services, user=user)
        return await schema.execute(query, variable_values=variables, context_value=context)

    return run
