"""
dependencies.py — FastAPI Dependency Injection.
Ustawienia z Request.app.state; kontekst refleksji budowany per żądanie
z przesłanych plików (bez współdzielonego stanu między żądaniami).
"""
from __future__ import annotations

from fastapi import Request

from adapters.context.in_memory_context import InMemoryContext
from api.schemas import SubjectSpec
from config import Settings
from contracts import FileNode
from ports.reflection import (
    ClassSubject,
    FileSubject,
    FunctionSubject,
    MethodSubject,
    NamespaceSubject,
    PropertySubject,
    Subject,
)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def build_context(files: list[FileNode], settings: Settings) -> InMemoryContext:
    return InMemoryContext(files, php_version=settings.php_version)


def build_subject(spec: SubjectSpec, context: InMemoryContext) -> Subject:
    match spec.kind:
        case "file":
            return FileSubject(spec.file_name)
        case "namespace":
            return NamespaceSubject(spec.name or "", spec.file_name)
        case "function":
            file_name = spec.file_name
            if file_name is None:
                file_name = context.get_function_reflection(spec.name).file_name
            return FunctionSubject(spec.name.lstrip("\\"), file_name)
        case "class":
            return ClassSubject(context.get_class_reflection(spec.class_name))
        case "method":
            return MethodSubject(spec.name, context.get_class_reflection(spec.class_name))
        case "property":
            return PropertySubject(spec.name, context.get_class_reflection(spec.class_name))
    raise ValueError(f"Unknown subject kind: {spec.kind}")
