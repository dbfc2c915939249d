"""Use Case: Apply exception fixes to source code."""

from typing import cast

from checked_exceptions_linter.domain.entities import (
    FixMode,
    FixResult,
    TransformationPlan,
    TransformationType,
)
from checked_exceptions_linter.domain.protocols import FixerGatewayProtocol
from checked_exceptions_linter.domain.rules import ExceptionDiagnostic, Fixable
from checked_exceptions_linter.domain.transformation_contexts import DeclareExceptionsContext
from checked_exceptions_linter.use_cases.check_exceptions import CheckExceptionsUseCase


class ApplyFixesUseCase:
    """Turn diagnostics into plans with the owning rule's fix() and hand them to the fixer, file by file."""

    def __init__(
        self,
        check_use_case: CheckExceptionsUseCase,
        fixer_gateway: FixerGatewayProtocol,
        rules: list[Fixable],
    ) -> None:
        self.check_use_case = check_use_case
        self.fixer_gateway = fixer_gateway
        self.rules = rules

    def execute(self, target_path: str, mode: FixMode) -> FixResult:
        files_modified = 0
        plans_applied = 0
        failed_files: list[str] = []
        for file_path in self.check_use_case.python_files(target_path):
            diagnostics = self.check_use_case.check_file(file_path)
            if diagnostics is None:
                failed_files.append(file_path)
                continue
            plans = self.collect_plans(diagnostics, mode)
            if not plans:
                continue
            if self.fixer_gateway.apply_fixes(file_path, plans):
                files_modified += 1
                plans_applied += len(plans)
        return FixResult(
            files_modified=files_modified,
            plans_applied=plans_applied,
            failed_files=failed_files,
        )

    def collect_plans(
        self, diagnostics: list[ExceptionDiagnostic], mode: FixMode
    ) -> list[TransformationPlan]:
        """Plans from every fixable diagnostic, docstring edits merged per function."""
        plans: list[TransformationPlan] = []
        for diagnostic in diagnostics:
            if not diagnostic.fixable:
                continue
            for rule in self.rules:
                if diagnostic.code in getattr(rule, "codes", []):
                    plans.extend(rule.fix(diagnostic, mode))
                    break
        return self.merge_declare_plans(plans)

    @staticmethod
    def merge_declare_plans(plans: list[TransformationPlan]) -> list[TransformationPlan]:
        """Combine DECLARE_EXCEPTIONS plans for one function; drop exact duplicates of the rest."""
        merged: dict[tuple[str, int], DeclareExceptionsContext] = {}
        others: list[TransformationPlan] = []
        for plan in plans:
            if plan.transformation_type is not TransformationType.DECLARE_EXCEPTIONS:
                if plan not in others:
                    others.append(plan)
                continue
            params = cast(DeclareExceptionsContext, plan.params)
            key = (params["function_name"], params["target_line"])
            if key not in merged:
                merged[key] = cast(DeclareExceptionsContext, {
                    **params,
                    "exception_names": list(params["exception_names"]),
                    "short_names": list(params["short_names"]),
                    "accessor_scopes": list(params["accessor_scopes"]),
                })
                continue
            target = merged[key]
            seen = set(zip(target["exception_names"], target["accessor_scopes"]))
            for name, short, scope in zip(
                params["exception_names"], params["short_names"], params["accessor_scopes"]
            ):
                if (name, scope) in seen:
                    continue
                seen.add((name, scope))
                target["exception_names"].append(name)
                target["short_names"].append(short)
                target["accessor_scopes"].append(scope)
            target["ignore"] = target["ignore"] or params["ignore"]
        declared = [
            TransformationPlan(TransformationType.DECLARE_EXCEPTIONS, params)
            for params in merged.values()
        ]
        return declared + others
