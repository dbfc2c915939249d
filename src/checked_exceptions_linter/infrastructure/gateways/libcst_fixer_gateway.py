"""LibCST based Fixer Gateway."""

import logging

import libcst as cst

from checked_exceptions_linter.domain.entities import TransformationPlan, TransformationType
from checked_exceptions_linter.domain.exceptions import UnknownTransformationError
from checked_exceptions_linter.domain.protocols import FixerGatewayProtocol
from checked_exceptions_linter.infrastructure.gateways.transformers import (
    AddImportTransformer,
    DocstringExceptionTransformer,
    HandleExceptionTransformer,
)


class LibCSTFixerGateway(FixerGatewayProtocol):
    """Gateway for applying safe code modifications using LibCST."""

    def _plan_to_transformer(self, plan: TransformationPlan) -> cst.CSTTransformer:
        """Convert a TransformationPlan to a LibCST transformer."""
        params = dict(plan.params)
        t = plan.transformation_type
        if t == TransformationType.ADD_IMPORT:
            return AddImportTransformer(params)
        elif t == TransformationType.DECLARE_EXCEPTIONS:
            return DocstringExceptionTransformer(params)
        elif t == TransformationType.HANDLE_EXCEPTIONS:
            return HandleExceptionTransformer(params)
        else:
            raise UnknownTransformationError(f"Unknown transformation type: {plan.transformation_type}")

    def apply_fixes(self, file_path: str, fixes: list[TransformationPlan]) -> bool:
        """
        Apply a list of plans to a file.

        Plans run bottom-up (highest target line first, imports last), each on a
        fresh MetadataWrapper so line positions reflect the edits made so far.

        Args:
            file_path: Path to the file to modify
            fixes: TransformationPlans to apply

        Returns:
            True if the file was modified, False otherwise (including parse errors)
        """
        try:
            with open(file_path, encoding="utf-8") as f:
                source = f.read()
            module = cst.parse_module(source)
        except (OSError, UnicodeDecodeError, cst.ParserSyntaxError) as exc:
            logging.warning("Cannot fix %s: %s", file_path, exc)
            return False

        original_code = module.code
        ordered = sorted(
            (fix for fix in fixes if fix is not None),
            key=lambda plan: plan.target_line,
            reverse=True,
        )
        for plan in ordered:
            transformer = self._plan_to_transformer(plan)
            # If transformer needs source_lines, inject the current text
            if hasattr(transformer, "source_lines") and not transformer.source_lines:
                transformer.source_lines = module.code.splitlines()
            module = cst.MetadataWrapper(module).visit(transformer)

        # Only write if code changed
        if module.code != original_code:
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(module.code)
            return True
        return False
