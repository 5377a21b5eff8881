"""Response shapes shared by all tools.

Tools answer with human-readable text plus optional structured data; a
failure is flagged with ``isError`` so clients can show it as an error
without parsing the text.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from pydantic import BaseModel, Field

from ..engine import LibraryEngine

logger = logging.getLogger(__name__)

ToolHandler = Callable[[LibraryEngine, dict[str, Any]], Awaitable[dict[str, Any]]]


def error_response(text: str) -> dict[str, Any]:
    return {"isError": True, "content": [{"type": "text", "text": text}]}


def success_response(text: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
    response: dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if data is not None:
        response["data"] = data
    return response


def tool_signature(input_model: type[BaseModel] | None) -> inspect.Signature:
    """Keyword-only parameters mirroring the fields of ``input_model``.

    fastmcp derives the advertised input schema from a tool's signature,
    so field types, constraints and descriptions reach the client.
    Model-level rules still run when the handler validates its arguments.
    """
    parameters = []
    fields = input_model.model_fields if input_model is not None else {}
    for name, field in fields.items():
        annotation = Annotated[
            (
                field.annotation,
                *field.metadata,
                Field(description=field.description, examples=field.examples),
            )
        ]
        default = (
            inspect.Parameter.empty
            if field.is_required()
            else field.get_default(call_default_factory=True)
        )
        parameters.append(
            inspect.Parameter(
                name, inspect.Parameter.KEYWORD_ONLY, default=default, annotation=annotation
            )
        )
    return inspect.Signature(parameters, return_annotation=dict[str, Any])


def bind_handler(
    handler: ToolHandler,
    engine: LibraryEngine,
    input_model: type[BaseModel] | None = None,
):
    """Close a handler over the engine so fastmcp only sees the tool's arguments.

    Handlers map the failures they expect to error responses. Anything
    else is logged with its traceback and reported the same way.
    """
    name = handler.__name__.removesuffix("_handler")
    signature = tool_signature(input_model)

    async def tool(**arguments: Any) -> dict[str, Any]:
        try:
            return await handler(engine, arguments)
        except Exception as e:
            logger.exception("Unexpected error in %s tool", name)
            return error_response(f"Unexpected error: {e!s}")

    tool.__name__ = name
    tool.__doc__ = handler.__doc__
    tool.__signature__ = signature  # type: ignore[attr-defined]
    tool.__annotations__ = {
        **{p.name: p.annotation for p in signature.parameters.values()},
        "return": signature.return_annotation,
    }
    return tool
