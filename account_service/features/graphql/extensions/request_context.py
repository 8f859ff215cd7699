"""Bind the activity-log request context around each GraphQL operation."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from graphql import FieldNode, Undefined, get_operation_ast, value_from_ast_untyped
from strawberry.extensions import SchemaExtension

from account_service.core.context import RequestContext, RequestUser, bind_request_context
from account_service.infra.logging import set_log_context

if TYPE_CHECKING:
    from graphql import DocumentNode

__all__ = ["RequestContextExtension", "build_request_context", "root_field_arguments"]


def root_field_arguments(
    document: DocumentNode | None,
    operation_name: str | None,
    variables: dict[str, Any] | None,
) -> tuple[tuple[str, ...], dict[str, Any]]:
    """Root field names of the selected operation and their argument values.

    Arguments of every root field are merged into one mapping; variable
    references are resolved against ``variables``.
    """
    operation = get_operation_ast(document, operation_name) if document else None
    if operation is None:
        return (), {}

    names: list[str] = []
    arguments: dict[str, Any] = {}
    for selection in operation.selection_set.selections:
        if not isinstance(selection, FieldNode):
            continue
        names.append(selection.name.value)
        for argument in selection.arguments:
            value = value_from_ast_untyped(argument.value, variables)
            if value is not Undefined:
                arguments[argument.name.value] = value
    return tuple(names), arguments


def build_request_context(
    query: str | None,
    operation_name: str | None,
    variables: dict[str, Any] | None,
    user: Any = None,
    document: DocumentNode | None = None,
) -> RequestContext:
    """The GraphQL envelope as the client sent it, plus the acting user."""
    body: dict[str, Any] = {"query": query, "operationName": operation_name}
    if variables is not None:
        body["variables"] = variables
    request_user = RequestUser(id=str(user.id), email=getattr(user, "email", None)) if user else None
    fields, arguments = root_field_arguments(document, operation_name, variables)
    return RequestContext(
        body=body,
        user=request_user,
        operation_fields=fields,
        arguments=arguments,
    )


class RequestContextExtension(SchemaExtension):
    """Expose variables, root-field arguments and the current user to writes made by resolvers."""

    def on_operation(self) -> Iterator[None]:
        user = getattr(self.execution_context.context, "user", None)
        if user is not None:
            set_log_context(user_id=str(user.id))
        yield

    def on_execute(self) -> Iterator[None]:
        # The document is parsed and validated by now
        execution_context = self.execution_context
        context = build_request_context(
            execution_context.query,
            execution_context.operation_name,
            execution_context.variables,
            getattr(execution_context.context, "user", None),
            execution_context.graphql_document,
        )
        with bind_request_context(context):
            yield
