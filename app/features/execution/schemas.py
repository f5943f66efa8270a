from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Any


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Requests

class CodeExecuteRequest(CamelModel):
    # language stays untyped; unknown values are rejected by the registry
    language: Optional[Any] = None
    code: Optional[str] = None
    input: Optional[str] = None
    project_id: Optional[str] = None


class TestCaseIn(CamelModel):
    __test__ = False  # not a pytest class

    input: Optional[str] = None
    expected_output: Optional[str] = None


class CodeExecuteWithTestsRequest(CamelModel):
    language: Optional[Any] = None
    code: Optional[str] = None
    test_cases: List[TestCaseIn] = Field(default_factory=list)


class CodeValidateRequest(CamelModel):
    language: Optional[Any] = None
    code: Optional[str] = None


# Responses

class ExecutionResultOut(CamelModel):
    output: str
    error: str
    status_code: int
    memory: str
    cpu_time: str
    language: str
    executed_at: str


class CodeExecuteResponse(CamelModel):
    message: str
    result: ExecutionResultOut


class TestCaseResult(CamelModel):
    __test__ = False

    index: int
    input: str
    expected_output: str
    actual_output: str
    passed: bool
    error: str = ""
    memory_used: str = ""
    cpu_time: str = ""
    status_code: int = 200


class BatchSummary(CamelModel):
    total_tests: int
    passed_tests: int
    failed_tests: int
    success_rate: float


class CodeExecuteWithTestsResponse(CamelModel):
    message: str
    summary: BatchSummary
    results: List[TestCaseResult]
    language: str
    executed_at: str


class LanguageOut(CamelModel):
    key: str
    name: str
    remote_language: str
    version_index: str


class LanguagesResponse(CamelModel):
    message: str
    languages: List[LanguageOut]


class CreditInfoResponse(CamelModel):
    message: str
    credit_info: Any


class CodeValidateResponse(CamelModel):
    message: str
    is_valid: bool
    violations: List[str]
    language: str


class TemplateResponse(CamelModel):
    message: str
    language: str
    template: str
