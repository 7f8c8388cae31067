"""
schemas.py — Request/Response modele FastAPI.
Oddzielone od contracts.py żeby API mogło ewoluować niezależnie.

Pliki przychodzą jako gotowe drzewa (FileNode) — parsowanie źródła
odbywa się po stronie klienta.

INF, -INF i NAN nie mają zapisu w JSON: w odpowiedziach są stringami
"INF", "-INF", "NAN" (tak jak PHP je wypisuje).
"""
from __future__ import annotations

import math
from typing import Any, Literal, Optional

from pydantic import BaseModel, field_serializer, model_validator

from adapters.evaluator.php_operators import to_string
from contracts import ExprNode, FileNode, ResolutionResult, TraitAdaptationNode


def _json_value(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return to_string(value)
    if isinstance(value, dict):
        return {key: _json_value(item) for key, item in value.items()}
    return value


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
    php_version: str


# ─────────────────────────── podmiot ─────────────────────────────

SubjectKind = Literal["file", "namespace", "function", "class", "method", "property"]


class SubjectSpec(BaseModel):
    """
    Opis podmiotu wyrażenia:
      file      — file_name
      namespace — name (może być ''), opcjonalnie file_name
      function  — name (FQN funkcji), opcjonalnie file_name
      class     — class_name
      method    — class_name + name
      property  — class_name + name
    """
    kind: SubjectKind
    name: Optional[str] = None
    class_name: Optional[str] = None
    file_name: Optional[str] = None

    @model_validator(mode="after")
    def _check_required(self) -> "SubjectSpec":
        if self.kind == "file" and not self.file_name:
            raise ValueError("file subject requires file_name")
        if self.kind == "function" and not self.name:
            raise ValueError("function subject requires name")
        if self.kind in ("class", "method", "property") and not self.class_name:
            raise ValueError(f"{self.kind} subject requires class_name")
        if self.kind in ("method", "property") and not self.name:
            raise ValueError(f"{self.kind} subject requires name")
        return self


# ─────────────────────────── /reflect/evaluate ───────────────────

class EvaluateRequest(BaseModel):
    files: list[FileNode] = []
    subject: SubjectSpec
    expression: ExprNode


class EvaluateResponse(ResolutionResult):
    @field_serializer("value", when_used="json")
    def _serialize_value(self, value: Any) -> Any:
        return _json_value(value)


# ─────────────────────────── /reflect/class ──────────────────────

class ClassRequest(BaseModel):
    files: list[FileNode] = []
    class_name: str


class ClassResponse(BaseModel):
    name: str
    short_name: str
    namespace_name: str
    file_name: Optional[str] = None
    is_interface: bool
    is_trait: bool
    is_abstract: bool
    is_final: bool
    parent: Optional[str] = None
    interfaces: list[str]
    traits: list[str]
    trait_adaptations: list[TraitAdaptationNode]
    trait_aliases: dict[str, str]
    methods: list[str]
    constants: dict[str, Any]
    default_properties: dict[str, Any]

    @field_serializer("constants", "default_properties", when_used="json")
    def _serialize_values(self, values: dict[str, Any]) -> dict[str, Any]:
        return _json_value(values)


# ─────────────────────────── /reflect/static-variables ───────────

class StaticVariablesRequest(BaseModel):
    """function_name ALBO class_name + method_name."""
    files: list[FileNode] = []
    function_name: Optional[str] = None
    class_name: Optional[str] = None
    method_name: Optional[str] = None

    @model_validator(mode="after")
    def _check_target(self) -> "StaticVariablesRequest":
        if self.function_name:
            return self
        if self.class_name and self.method_name:
            return self
        raise ValueError("either function_name or class_name with method_name is required")


class StaticVariablesResponse(BaseModel):
    owner: str
    static_variables: dict[str, Any]

    @field_serializer("static_variables", when_used="json")
    def _serialize_values(self, values: dict[str, Any]) -> dict[str, Any]:
        return _json_value(values)
