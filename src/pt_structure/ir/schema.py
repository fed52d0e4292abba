"""Pydantic models for Portable Text input and the structured output tree.

Input is the flat Portable Text block array: text blocks carry spans whose
formatting lives in a per-block table of mark definitions, and list items
are ordinary text blocks tagged with a list kind and a nesting level.
Output is a tree of ``StructuredBlock`` nodes where both are explicit.
"""

from __future__ import annotations

from typing import Annotated, Any, Iterable, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    SerializerFunctionWrapHandler,
    Tag,
    TypeAdapter,
    model_serializer,
)

# Fields whose name starts with this marker are Portable Text internals
# (_type, _key, _ref, ...) and never become output props.
INTERNAL_FIELD_PREFIX = "_"


def public_fields(data: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Return the entries of ``data`` that are not Portable Text internals."""
    return {k: v for k, v in (data or {}).items() if not k.startswith(INTERNAL_FIELD_PREFIX)}


# ---------------------------------------------------------------------------
# Inline content
# ---------------------------------------------------------------------------


class Span(BaseModel):
    """A run of text carrying a set of mark ids."""

    type: str = Field(default="span", alias="_type")
    key: Optional[str] = Field(default=None, alias="_key")
    text: str = ""
    marks: list[str] = Field(default_factory=list)


class MarkDef(BaseModel):
    """A mark definition (annotation) such as a link with its href."""

    model_config = ConfigDict(extra="allow")

    kind: str = Field(alias="_type")
    key: Optional[str] = Field(default=None, alias="_key")

    @property
    def props(self) -> dict[str, Any]:
        return public_fields(self.model_extra)


# ---------------------------------------------------------------------------
# Block variants (tagged union, see PTBlock below)
# ---------------------------------------------------------------------------


class TextBlock(BaseModel):
    type: Literal["block"] = Field(default="block", alias="_type")
    key: Optional[str] = Field(default=None, alias="_key")
    style: str = "normal"
    children: list[Span] = Field(default_factory=list)
    mark_defs: list[MarkDef] = Field(default_factory=list, alias="markDefs")


class ListItemBlock(TextBlock):
    """A text block that is also an entry of a bullet or numbered list."""

    list_item: str = Field(alias="listItem")
    level: Optional[int] = None

    @property
    def depth(self) -> int:
        """Nesting level, 1 when the block carries none."""
        return self.level or 1


class CustomBlock(BaseModel):
    """Any non-text block (image, code, embed...). Its fields are kept as extras."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(alias="_type")
    key: Optional[str] = Field(default=None, alias="_key")

    @property
    def props(self) -> dict[str, Any]:
        return public_fields(self.model_extra)


def _block_variant(value: Any) -> str:
    if isinstance(value, dict):
        if value.get("_type") != "block":
            return "custom"
        return "list_item" if value.get("listItem") else "text"
    if isinstance(value, ListItemBlock):
        return "list_item"
    if isinstance(value, TextBlock):
        return "text"
    return "custom"


PTBlock = Annotated[
    Union[
        Annotated[TextBlock, Tag("text")],
        Annotated[ListItemBlock, Tag("list_item")],
        Annotated[CustomBlock, Tag("custom")],
    ],
    Discriminator(_block_variant),
]

_BLOCKS_ADAPTER = TypeAdapter(list[PTBlock])


def parse_blocks(data: Iterable[Any]) -> list[PTBlock]:
    """Validate raw Portable Text dicts (or already-built blocks) into PTBlock models.

    Raises:
        pydantic.ValidationError: If a block does not match its variant.
    """
    return _BLOCKS_ADAPTER.validate_python(list(data))


# ---------------------------------------------------------------------------
# Structured output
# ---------------------------------------------------------------------------


class StructuredBlock(BaseModel):
    """One node of the output tree.

    Only the fields a node was built with are serialized, on every dump
    path, so a custom block node has no ``content`` key at all and a
    wrapper for an undefined mark has no ``props`` key.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    content: Optional[Union[str, list[StructuredBlock]]] = None
    props: Optional[dict[str, Any]] = None

    @model_serializer(mode="wrap")
    def _omit_unset_fields(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        return {k: v for k, v in data.items() if k in self.model_fields_set}

    @property
    def children(self) -> list[StructuredBlock]:
        """Child nodes, empty for text leaves and content-less nodes."""
        return self.content if isinstance(self.content, list) else []

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


StructuredBlock.model_rebuild()

_NODES_ADAPTER = TypeAdapter(list[StructuredBlock])


def dump_nodes(nodes: list[StructuredBlock], indent: Optional[int] = 2) -> str:
    """Serialize an output tree to a JSON string."""
    return _NODES_ADAPTER.dump_json(nodes, indent=indent).decode("utf-8")
