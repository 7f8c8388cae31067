"""
Router: /reflect
Statyczna refleksja nad przesłanymi drzewami składni:
  POST /reflect/evaluate          — wartość wyrażenia dla podmiotu
  POST /reflect/class             — struktura klasy (rodzic, interfejsy, traity, metody, stałe)
  POST /reflect/static-variables  — zmienne statyczne funkcji lub metody

ReflectionError → 422 (handler w api/main.py).
"""
import logging

from fastapi import APIRouter, Depends

from api.dependencies import build_context, build_subject, get_settings
from api.schemas import (
    ClassRequest,
    ClassResponse,
    EvaluateRequest,
    EvaluateResponse,
    StaticVariablesRequest,
    StaticVariablesResponse,
)
from config import Settings
from reflection import evaluate

logger = logging.getLogger("static_reflection.api")

router = APIRouter(prefix="/reflect", tags=["reflect"])


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_expression(
    body: EvaluateRequest,
    settings: Settings = Depends(get_settings),
) -> EvaluateResponse:
    context = build_context(body.files, settings)
    subject = build_subject(body.subject, context)
    result = evaluate(body.expression, subject, context)
    logger.debug("Evaluated %s for %r → %s", body.expression.node_type, subject, result.status)
    return EvaluateResponse(**result.model_dump())


@router.post("/class", response_model=ClassResponse)
async def describe_class(
    body: ClassRequest,
    settings: Settings = Depends(get_settings),
) -> ClassResponse:
    context = build_context(body.files, settings)
    # Tylko klasy z przesłanych plików (natywne nie mają drzewa)
    context.parse_class(body.class_name)
    reflection = context.get_class_reflection(body.class_name)

    parent = reflection.get_parent_class()
    return ClassResponse(
        name=reflection.name,
        short_name=reflection.short_name,
        namespace_name=reflection.namespace_name,
        file_name=reflection.file_name,
        is_interface=reflection.is_interface(),
        is_trait=reflection.is_trait(),
        is_abstract=reflection.is_abstract(),
        is_final=reflection.is_final(),
        parent=parent.name if parent is not None else None,
        interfaces=reflection.get_interface_names(),
        traits=reflection.get_trait_names(),
        trait_adaptations=reflection.get_trait_adaptations(),
        trait_aliases=reflection.get_trait_aliases(),
        methods=reflection.get_method_names(),
        constants=reflection.get_constants(),
        default_properties=reflection.get_default_properties(),
    )


@router.post("/static-variables", response_model=StaticVariablesResponse)
async def static_variables(
    body: StaticVariablesRequest,
    settings: Settings = Depends(get_settings),
) -> StaticVariablesResponse:
    context = build_context(body.files, settings)

    if body.function_name:
        function = context.get_function_reflection(body.function_name)
        return StaticVariablesResponse(
            owner=function.name,
            static_variables=function.get_static_variables(),
        )

    context.parse_class(body.class_name)
    reflection = context.get_class_reflection(body.class_name)
    return StaticVariablesResponse(
        owner=f"{reflection.name}::{body.method_name}",
        static_variables=reflection.get_static_variables(body.method_name),
    )
