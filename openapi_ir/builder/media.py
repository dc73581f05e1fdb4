"""Lowering of `content` maps shared by request bodies, responses and headers."""

from collections.abc import Mapping
from typing import Optional

from ..ir.collections import OrderedMap
from ..ir.operations import MediaType
from .context import BuildContext
from .schemas import build_optional_schema
from .utils import extract_extensions, opaque_or_none, opaque_or_not_set


def build_media_type(media: Mapping, ctx: BuildContext) -> MediaType:
    media = media or {}
    return MediaType(
        schema=build_optional_schema(media.get("schema"), ctx.child("schema")),
        example=opaque_or_not_set(media, "example"),
        examples=opaque_or_none(media, "examples"),
        encoding=opaque_or_none(media, "encoding"),
        extensions=extract_extensions(media),
    )


def build_content(content: Optional[Mapping], ctx: BuildContext) -> Optional[OrderedMap]:
    """
    Lower a `content` map, keeping media type order.

    ctx.required applies to every media type schema.
    """
    if content is None:
        return None
    return OrderedMap(
        (media_type, build_media_type(media, ctx.child("content", media_type)))
        for media_type, media in content.items()
    )
