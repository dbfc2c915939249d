"""TypedDict parameter shapes for TransformationPlan. Read by the libcst transformers."""

from typing import TypedDict, Union


class ImportContext(TypedDict):
    module: str
    imports: list[str]


class DeclareExceptionsContext(TypedDict):
    function_name: str
    target_line: int
    exception_names: list[str]
    short_names: list[str]
    ignore: bool
    accessor_scopes: list[str]
    short_form: bool
    title: str
    parameters: list[str]
    returns_value: bool
    member_kind: str


class HandleExceptionsContext(TypedDict):
    target_line: int
    exception_names: list[str]
    enclosing_try_line: int


PlanParams = Union[ImportContext, DeclareExceptionsContext, HandleExceptionsContext]
