from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

HttpVerb = Literal["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]
ParamRole = Literal["query", "path", "header", "body"]
TypeTrait = Literal["map", "array", "collection", "iterable", "scalar"]

HTTP_VERBS: tuple[str, ...] = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE")


class TypeRef(BaseModel):
    name: str
    module: Optional[str] = None  # import source, e.g. shop.models
    args: list[TypeRef] = Field(default_factory=list)
    traits: Optional[list[TypeTrait]] = None  # None -> inferred from name

    @property
    def is_none(self) -> bool:
        return self.name == "None" and not self.args


class PropertyDescriptor(BaseModel):
    name: str
    reader: Optional[str] = None  # expression; defaults to <param>.<name>


class ParameterDescriptor(BaseModel):
    name: str
    type: TypeRef = Field(default_factory=lambda: TypeRef(name="Any"))
    role: Optional[ParamRole] = None  # None -> passthrough

    query_name: Optional[str] = None
    path_name: Optional[str] = None
    index: Optional[int] = None
    header_name: Optional[str] = None

    properties: list[PropertyDescriptor] = Field(default_factory=list)


class MethodDescriptor(BaseModel):
    name: str
    verb: str  # validated at synthesis time so errors carry method context
    path: str = ""
    parameters: list[ParameterDescriptor] = Field(default_factory=list)
    returns: TypeRef = Field(default_factory=lambda: TypeRef(name="None"))

    @property
    def is_void(self) -> bool:
        return self.returns.is_none


class InterfaceDescriptor(BaseModel):
    name: str
    module: Optional[str] = None
    base_path: Optional[str] = None
    client_name: Optional[str] = None

    methods: list[MethodDescriptor] = Field(default_factory=list)


class SynthesisOptions(BaseModel):
    transport_field: str = "transport"
    class_suffix: str = "Connector"
    runtime_module: str = "restsynth.runtime"
    scheme: str = "http"
