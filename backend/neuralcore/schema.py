"""
Schema Contract — declarative description of the shape a generation result must have.

A SchemaDescriptor carries no backend-specific syntax. Each transport translates
it into what its wire protocol expects:
  - native structured backends get ``to_native_schema()`` (upper-case OpenAPI subset)
  - JSON-mode backends get ``json_instruction()`` appended to the prompt

Usage:
    from neuralcore.schema import array_of, object_of, string
    FLASHCARDS = array_of(object_of(
        {"term": string(), "definition": string()},
        required=["term", "definition"],
    ))
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from neuralcore.config import TEMPERATURE


class SchemaType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


_PY_TYPES = {
    SchemaType.STRING: (str,),
    SchemaType.NUMBER: (int, float),
    SchemaType.INTEGER: (int,),
    SchemaType.BOOLEAN: (bool,),
    SchemaType.ARRAY: (list,),
    SchemaType.OBJECT: (dict,),
}


@dataclass(frozen=True)
class SchemaDescriptor:
    type: SchemaType
    description: str = ""
    items: Optional["SchemaDescriptor"] = None
    properties: dict[str, "SchemaDescriptor"] = field(default_factory=dict)
    required: tuple[str, ...] = ()

    def to_json_schema(self) -> dict:
        """Render as a standard JSON Schema dict."""
        out: dict[str, Any] = {"type": self.type.value}
        if self.description:
            out["description"] = self.description
        if self.type is SchemaType.ARRAY and self.items is not None:
            out["items"] = self.items.to_json_schema()
        if self.type is SchemaType.OBJECT:
            out["properties"] = {k: v.to_json_schema() for k, v in self.properties.items()}
            if self.required:
                out["required"] = list(self.required)
        return out

    def to_native_schema(self) -> dict:
        """Render in the OpenAPI subset accepted by the native structured SDK."""
        out: dict[str, Any] = {"type": self.type.value.upper()}
        if self.description:
            out["description"] = self.description
        if self.type is SchemaType.ARRAY and self.items is not None:
            out["items"] = self.items.to_native_schema()
        if self.type is SchemaType.OBJECT:
            out["properties"] = {k: v.to_native_schema() for k, v in self.properties.items()}
            if self.required:
                out["required"] = list(self.required)
        return out

    def validate(self, value: Any, path: str = "$") -> list[str]:
        """Return a list of problems; empty when ``value`` conforms."""
        expected = _PY_TYPES[self.type]
        # bool is an int subclass; keep it out of numeric slots
        if isinstance(value, bool) and self.type is not SchemaType.BOOLEAN:
            return [f"{path}: expected {self.type.value}, got boolean"]
        if not isinstance(value, expected):
            return [f"{path}: expected {self.type.value}, got {type(value).__name__}"]

        problems = []
        if self.type is SchemaType.ARRAY and self.items is not None:
            for i, item in enumerate(value):
                problems.extend(self.items.validate(item, f"{path}[{i}]"))
        elif self.type is SchemaType.OBJECT:
            for name in self.required:
                if name not in value:
                    problems.append(f"{path}.{name}: required field missing")
            for name, sub in self.properties.items():
                if name in value:
                    problems.extend(sub.validate(value[name], f"{path}.{name}"))
        return problems


@dataclass(frozen=True)
class GenerationRequest:
    """One abstract generation call. Built per call, never persisted."""

    prompt: str
    schema: SchemaDescriptor
    temperature: float = TEMPERATURE["default"]


# ── Constructors ──

def string(description: str = "") -> SchemaDescriptor:
    return SchemaDescriptor(SchemaType.STRING, description)


def number(description: str = "") -> SchemaDescriptor:
    return SchemaDescriptor(SchemaType.NUMBER, description)


def integer(description: str = "") -> SchemaDescriptor:
    return SchemaDescriptor(SchemaType.INTEGER, description)


def boolean(description: str = "") -> SchemaDescriptor:
    return SchemaDescriptor(SchemaType.BOOLEAN, description)


def array_of(items: SchemaDescriptor, description: str = "") -> SchemaDescriptor:
    return SchemaDescriptor(SchemaType.ARRAY, description, items=items)


def object_of(properties: dict[str, SchemaDescriptor], required=(),
              description: str = "") -> SchemaDescriptor:
    return SchemaDescriptor(
        SchemaType.OBJECT, description,
        properties=dict(properties), required=tuple(required),
    )


# ── Prompt instruction for JSON-mode backends ──

def json_instruction(schema: SchemaDescriptor) -> str:
    """Textual suffix demanding JSON-only output that matches ``schema``."""
    rendered = json.dumps(schema.to_json_schema(), indent=2)
    return (
        "\n\nRespond with JSON only. Do not include explanations, prose, or markdown "
        "code fences. The JSON must match this schema exactly:\n"
        f"{rendered}"
    )
