from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.common.deps import CurrentUser, get_optional_user
from app.common.quota import enforce_execution_payload
from app.common.utils import utc_now_iso
from app.core.config import Settings, get_settings
from app.features.projects.repository import (
    ProjectRepository,
    get_project_repository,
    record_execution,
)
from .batch import BatchCoordinator, to_test_cases
from .errors import ExecutionError
from .languages import describe_all, resolve, template_for
from .pacing import Pacer
from .schemas import (
    CodeExecuteRequest,
    CodeExecuteResponse,
    CodeExecuteWithTestsRequest,
    CodeExecuteWithTestsResponse,
    CodeValidateRequest,
    CodeValidateResponse,
    CreditInfoResponse,
    ExecutionResultOut,
    LanguageOut,
    LanguagesResponse,
    TemplateResponse,
)
from .service import ExecutionRequest, JDoodleService
from .validation import validate_code

router = APIRouter(tags=["code"])
logger = logging.getLogger(__name__)


def get_execution_service(settings: Settings = Depends(get_settings)) -> JDoodleService:
    return JDoodleService(settings)


def get_pacer(settings: Settings = Depends(get_settings)) -> Pacer:
    return Pacer(delay_s=settings.batch_delay_s)


@router.post("/execute", response_model=CodeExecuteResponse)
async def execute_code(
    payload: CodeExecuteRequest,
    service: JDoodleService = Depends(get_execution_service),
    projects: ProjectRepository = Depends(get_project_repository),
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
):
    language = resolve(payload.language)
    enforce_execution_payload(payload.code, payload.input)
    service.ensure_configured()

    outcome = await service.run(ExecutionRequest(language=language, source=payload.code, stdin=payload.input or ""))

    if payload.project_id and current_user is not None:
        await record_execution(projects, payload.project_id, current_user.id)

    return CodeExecuteResponse(
        message="Code executed successfully",
        result=ExecutionResultOut(
            output=outcome.stdout,
            error=outcome.stderr,
            status_code=outcome.status_code,
            memory=outcome.memory_used,
            cpu_time=outcome.cpu_time,
            language=language.key,
            executed_at=utc_now_iso(),
        ),
    )


@router.post("/execute-with-tests", response_model=CodeExecuteWithTestsResponse)
async def execute_with_tests(
    payload: CodeExecuteWithTestsRequest,
    service: JDoodleService = Depends(get_execution_service),
    pacer: Pacer = Depends(get_pacer),
):
    language = resolve(payload.language)
    enforce_execution_payload(payload.code, test_inputs=[case.input for case in payload.test_cases])
    service.ensure_configured()

    coordinator = BatchCoordinator(service, pacer=pacer)
    report = await coordinator.run_batch(language, payload.code, to_test_cases(payload.test_cases))

    return CodeExecuteWithTestsResponse(
        message="Code executed with test cases",
        summary=report.summary,
        results=report.results,
        language=language.key,
        executed_at=utc_now_iso(),
    )


@router.get("/languages", response_model=LanguagesResponse)
async def get_supported_languages():
    return LanguagesResponse(
        message="Supported languages retrieved successfully",
        languages=[LanguageOut.model_validate(item) for item in describe_all()],
    )


@router.get("/templates/{language}", response_model=TemplateResponse)
async def get_code_template(language: str):
    template = template_for(language)
    return TemplateResponse(
        message="Code template retrieved successfully",
        language=language,
        template=template,
    )


@router.get("/credits", response_model=CreditInfoResponse)
async def get_credit_info(service: JDoodleService = Depends(get_execution_service)):
    service.ensure_configured()
    try:
        credit_info = await service.fetch_quota()
    except ExecutionError as exc:
        logger.warning("credit lookup failed kind=%s", exc.kind)
        raise ExecutionError("Unable to retrieve credit information") from exc
    return CreditInfoResponse(
        message="Credit information retrieved successfully",
        credit_info=credit_info,
    )


@router.post("/validate", response_model=CodeValidateResponse)
async def validate(payload: CodeValidateRequest):
    language = resolve(payload.language)
    violations = validate_code(language.key, payload.code or "")
    return CodeValidateResponse(
        message="Code validation completed",
        is_valid=not violations,
        violations=violations,
        language=language.key,
    )
