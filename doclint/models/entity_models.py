"""
Documentation Model - Entities exported by the external documentation engine.

These models are the read-only input of every rule. They are built once per
run (usually from the engine's JSON export) and never mutated afterwards.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    ALL = "all"


class Tag(BaseModel):
    """A single documentation tag, e.g. ``@param name [String] the name``."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Tag name without the '@' prefix")
    types: list[str] = Field(default_factory=list, description="Free-form type list")
    text: str = Field(default="", description="Free-form tag text")
    param_name: str | None = Field(
        default=None, description="Parameter the tag refers to (@param, @option)"
    )


class Parameter(BaseModel):
    """A method parameter as written in the signature."""

    model_config = ConfigDict(frozen=True)

    name: str
    default: str | None = None

    @property
    def is_splat(self) -> bool:
        return self.name.startswith(("*", "&"))


class DocumentableEntity(BaseModel):
    """One documentable unit of code: module, class, method, constant."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Qualified path, e.g. 'Foo::Bar#baz'")
    title: str = Field(default="", description="Display title (defaults to path)")
    kind: str = Field(default="method", description="module, class, method, constant, ...")
    file: str | None = Field(default=None, description="Source file")
    line: int | None = Field(default=None, description="Line of the definition")
    visibility: Visibility | None = Field(
        default=None, description="None for namespaces that have no visibility"
    )
    docstring: str = Field(default="", description="Raw documentation text")
    tags: list[Tag] = Field(default_factory=list)
    parameters: list[Parameter] = Field(default_factory=list)
    is_alias: bool = False
    is_explicit: bool = True
    source: str = Field(default="", description="Raw source of the definition")

    @model_validator(mode="before")
    @classmethod
    def _default_title(cls, data):
        if isinstance(data, dict) and not data.get("title"):
            data = {**data, "title": data.get("path", "")}
        return data

    @property
    def name(self) -> str:
        """Short name: the last segment of the path."""
        for separator in ("#", ".", "::"):
            if separator in self.path:
                return self.path.rsplit(separator, 1)[-1]
        return self.path

    @property
    def is_documented(self) -> bool:
        return bool(self.docstring.strip()) or bool(self.tags)

    def tags_named(self, name: str) -> list[Tag]:
        return [tag for tag in self.tags if tag.name == name]

    def tag(self, name: str) -> Tag | None:
        tags = self.tags_named(name)
        return tags[0] if tags else None

    def has_tag(self, name: str) -> bool:
        return self.tag(name) is not None
