"""
Tests for the schema contract: rendering for each wire style and validation.
"""

import dataclasses
import json

import pytest

from neuralcore.content import QUIZ_SCHEMA
from neuralcore.schema import (
    GenerationRequest,
    SchemaType,
    array_of,
    boolean,
    json_instruction,
    number,
    object_of,
    string,
)


FLASHCARDS = array_of(object_of(
    {
        "term": string("The term"),
        "definition": string(),
        "options": array_of(string()),
    },
    required=["term", "definition"],
))


class TestRendering:

    def test_json_schema_lowercase(self):
        rendered = FLASHCARDS.to_json_schema()
        assert rendered["type"] == "array"
        item = rendered["items"]
        assert item["type"] == "object"
        assert item["required"] == ["term", "definition"]
        assert item["properties"]["term"] == {"type": "string", "description": "The term"}
        assert item["properties"]["options"] == {"type": "array", "items": {"type": "string"}}

    def test_native_schema_uppercase(self):
        rendered = FLASHCARDS.to_native_schema()
        assert rendered["type"] == "ARRAY"
        assert rendered["items"]["type"] == "OBJECT"
        assert rendered["items"]["properties"]["definition"] == {"type": "STRING"}

    def test_object_without_required_omits_key(self):
        assert "required" not in object_of({"a": string()}).to_json_schema()

    def test_json_instruction_embeds_schema(self):
        text = json_instruction(FLASHCARDS)
        assert "Respond with JSON only" in text
        schema_part = text[text.index("{"):]
        assert json.loads(schema_part) == FLASHCARDS.to_json_schema()


class TestValidation:

    def test_conforming_value(self):
        value = [{"term": "Atom", "definition": "Smallest unit", "options": ["a", "b"]}]
        assert FLASHCARDS.validate(value) == []

    def test_missing_required_field(self):
        problems = FLASHCARDS.validate([{"term": "Atom"}])
        assert problems == ["$[0].definition: required field missing"]

    def test_wrong_container(self):
        assert FLASHCARDS.validate({"term": "Atom"}) == ["$: expected array, got dict"]

    def test_bool_is_not_a_number(self):
        assert number().validate(True) == ["$: expected number, got boolean"]
        assert boolean().validate(True) == []

    def test_quiz_schema_accepts_real_question(self):
        question = {
            "question": "Which material is a good conductor?",
            "options": ["Copper", "Rubber", "Plastic", "Wood"],
            "correctAnswer": "Copper",
            "topic": "Electrical Conductors and Insulators",
        }
        assert QUIZ_SCHEMA.validate([question]) == []


class TestRequest:

    def test_request_is_immutable(self):
        request = GenerationRequest("prompt", string())
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.prompt = "other"
        assert request.schema.type is SchemaType.STRING
        assert request.temperature == 0.7
