"""Noise filter: drop violations of exception families the configuration does not flag."""

from collections.abc import Sequence
from typing import TypeVar

from checked_exceptions_linter.domain.config import ConfigurationLoader
from checked_exceptions_linter.domain.constants import NOISE_FAMILIES
from checked_exceptions_linter.domain.entities import ExceptionType
from checked_exceptions_linter.domain.rules import Violation

V = TypeVar("V", bound=Violation)


class NoiseFilter:
    """
    Removes violations whose type belongs to an unflagged family. Order is preserved.

    Families nest (UnicodeError and io.UnsupportedOperation both derive from
    ValueError), so a type belongs to the family of the nearest root in its
    ancestry: the type itself first, then its ancestors in astroid order.
    """

    def __init__(self, config_loader: ConfigurationLoader) -> None:
        self._flagged_roots: dict[str, bool] = {
            qname: config_loader.is_family_flagged(flag)
            for flag, roots in NOISE_FAMILIES.items()
            for qname in roots
        }

    def is_noise(self, exception_type: ExceptionType) -> bool:
        for qname in (exception_type.qname, *exception_type.ancestors):
            flagged = self._flagged_roots.get(qname)
            if flagged is not None:
                return not flagged
        return False

    def filter(self, violations: Sequence[V]) -> list[V]:
        return [v for v in violations if not self.is_noise(v.exception_type)]
