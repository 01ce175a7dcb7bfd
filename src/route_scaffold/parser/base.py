"""Data models for the API documents the generator consumes.

Only the fields the generator reads are declared; everything else is kept as
extra data so it can be emitted verbatim as endpoint documentation.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from route_scaffold.errors import InvalidSpecification

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

PARAMETERS_KEY = "parameters"


class ParameterSpec(BaseModel):
    """A single parameter; identified by its (in, name) pair."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    location: str = Field(alias="in")  # query / path / header / body / formData

    def fields(self) -> dict[str, Any]:
        """All fields as written in the document, `in` included."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class Operation(BaseModel):
    """The specification of one HTTP method of an endpoint."""

    model_config = ConfigDict(extra="allow")

    summary: str = ""
    description: str | None = None
    parameters: list[ParameterSpec] = []

    _document: dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "Operation":
        operation = cls.model_validate(data)
        operation._document = data
        return operation

    def documentation(self) -> dict[str, Any]:
        """Every field of the operation, passthrough metadata included.

        Operations read from a document return it as written, key order kept.
        """
        if self._document:
            return self._document
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class Endpoint(BaseModel):
    """One path template with its endpoint-wide parameters and operations."""

    path: str
    parameters: list[ParameterSpec] | None = None  # None when the key is absent
    operations: dict[str, Operation] = {}  # upper-case verb -> operation

    @property
    def verbs(self) -> list[str]:
        return list(self.operations)


class ApiDoc(BaseModel):
    """An OpenAPI v2 style document."""

    model_config = ConfigDict(extra="allow")

    info: dict[str, Any] = {}
    paths: dict[str, dict[str, Any] | None] = {}

    _document: dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "ApiDoc":
        doc = cls.model_validate(data)
        doc._document = data
        return doc

    @property
    def version(self) -> str | None:
        version = self.info.get("version")
        if version is None and self.model_extra:
            version = self.model_extra.get("version")
        return None if version is None else str(version)

    def endpoints(self) -> list[Endpoint]:
        try:
            return [_endpoint(path, item or {}) for path, item in self.paths.items()]
        except ValidationError as e:
            raise InvalidSpecification(str(e)) from e

    def base_document(self) -> dict[str, Any]:
        """The document with its path definitions cleared, key order kept."""
        source = self._document or self.model_dump(mode="json")
        return {**source, "paths": {}}


def _endpoint(path: str, item: dict[str, Any]) -> Endpoint:
    parameters = None
    operations: dict[str, Operation] = {}
    for key, value in item.items():
        if key == PARAMETERS_KEY:
            parameters = [ParameterSpec.model_validate(p) for p in value or []]
            continue
        verb = str(key).lower()
        if verb not in HTTP_METHODS:
            logger.debug("%s: ignoring path item key %r", path, key)
            continue
        if verb.upper() in operations:
            logger.debug("%s: duplicate method %r ignored", path, key)
            continue
        operations[verb.upper()] = Operation.from_document(value or {})
    return Endpoint(path=path, parameters=parameters, operations=operations)
