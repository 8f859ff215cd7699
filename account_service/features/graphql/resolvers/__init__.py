"""GraphQL resolvers."""

from __future__ import annotations

from account_service.features.graphql.resolvers.mutations import Mutation
from account_service.features.graphql.resolvers.queries import Query

__all__ = ["Mutation", "Query"]
