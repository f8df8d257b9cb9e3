from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class TextNode(BaseModel):
    type: Literal["text"] = "text"
    text: str
    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    strikethrough: bool | None = None
    code: bool | None = None


class LinkNode(BaseModel):
    type: Literal["link"] = "link"
    url: str
    children: list[TextNode]


InlineNode = Annotated[Union[TextNode, LinkNode], Field(discriminator="type")]


class ListItemNode(BaseModel):
    type: Literal["list-item"] = "list-item"
    children: list[InlineNode]


class ParagraphBlock(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    children: list[InlineNode]


class HeadingBlock(BaseModel):
    type: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=6)
    children: list[InlineNode]


class ListBlock(BaseModel):
    type: Literal["list"] = "list"
    format: Literal["ordered", "unordered"]
    children: list[ListItemNode]


class QuoteBlock(BaseModel):
    type: Literal["quote"] = "quote"
    children: list[InlineNode]


class CodeBlock(BaseModel):
    type: Literal["code"] = "code"
    children: list[TextNode]


class ImageInfo(BaseModel):
    url: str
    alternativeText: str | None = None
    width: int | None = None
    height: int | None = None


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    image: ImageInfo
    children: list[TextNode] = Field(default_factory=list)


BlockNode = Annotated[
    Union[ParagraphBlock, HeadingBlock, ListBlock, QuoteBlock, CodeBlock, ImageBlock],
    Field(discriminator="type"),
]

BlocksContent = list[BlockNode]

blocks_adapter: TypeAdapter[list[BlockNode]] = TypeAdapter(BlocksContent)


def paragraph(text: str) -> list[dict[str, Any]]:
    return [ParagraphBlock(children=[TextNode(text=text)]).model_dump(exclude_none=True)]


def to_blocks(content: Any) -> list[dict[str, Any]] | None:
    """Normalise a textual field to block format.

    Lists (even empty ones) are assumed to already be blocks and are returned
    as-is, non-empty strings become a single paragraph, anything else becomes None.
    """
    if isinstance(content, list):
        return content
    if isinstance(content, str) and content:
        return paragraph(content)
    return None


def _node_text(node: Any) -> str:
    if not isinstance(node, dict):
        return ""
    if node.get("type") == "text":
        return str(node.get("text") or "")
    return "".join(_node_text(child) for child in node.get("children") or [])


def blocks_to_text(blocks: list[dict[str, Any]] | None) -> str:
    """Plain text of a block list, one line per top-level block (list items on their own lines)."""
    if not blocks:
        return ""
    lines: list[str] = []
    for block in blocks:
        if isinstance(block, dict) and block.get("type") == "list":
            lines.extend(_node_text(item) for item in block.get("children") or [])
            continue
        lines.append(_node_text(block))
    return "\n".join(line for line in lines if line)
