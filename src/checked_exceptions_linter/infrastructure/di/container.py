from typing import TYPE_CHECKING, Any, Optional, cast

from checked_exceptions_linter.domain.config import ConfigurationLoader
from checked_exceptions_linter.domain.rules.declarations import DeclarationExtractor
from checked_exceptions_linter.domain.rules.event_handlers import EventHandlerRule
from checked_exceptions_linter.domain.rules.exception_flow import ExceptionFlowAnalyzer
from checked_exceptions_linter.domain.rules.noise_filter import NoiseFilter
from checked_exceptions_linter.domain.rules.substitution import SubstitutionRule
from checked_exceptions_linter.domain.rules.unhandled_exceptions import UnhandledExceptionRule
from checked_exceptions_linter.domain.services.member_resolver import MemberResolver
from checked_exceptions_linter.infrastructure.config_file_loader import ConfigFileLoader
from checked_exceptions_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from checked_exceptions_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from checked_exceptions_linter.infrastructure.gateways.libcst_fixer_gateway import (
    LibCSTFixerGateway,
)
from checked_exceptions_linter.infrastructure.services.guidance_service import GuidanceService

if TYPE_CHECKING:
    from checked_exceptions_linter.domain.protocols import (
        AstroidGatewayProtocol,
        FileSystemProtocol,
        FixerGatewayProtocol,
    )


class CheckedExceptionsContainer:
    """Dependency Injection Container for the checked-exceptions linter."""

    _instance: Optional["CheckedExceptionsContainer"] = None

    def __init__(self, config_loader: ConfigurationLoader | None = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config_loader)

    def _register_defaults(self, config_loader: ConfigurationLoader | None) -> None:
        """Register default implementations. One config snapshot feeds every rule."""
        if config_loader is None:
            config_loader = ConfigurationLoader(ConfigFileLoader.load_config_from_fs())
        self.register_singleton("ConfigurationLoader", config_loader)
        self.register_singleton("GuidanceService", GuidanceService())
        self.register_singleton("AstroidGateway", AstroidGateway())
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("LibCSTFixerGateway", LibCSTFixerGateway())

        resolver = MemberResolver()
        extractor = DeclarationExtractor(resolver=resolver)
        noise_filter = NoiseFilter(config_loader)
        self.register_singleton("MemberResolver", resolver)
        self.register_singleton("DeclarationExtractor", extractor)
        self.register_singleton(
            "UnhandledExceptionRule",
            UnhandledExceptionRule(
                config_loader,
                extractor=extractor,
                resolver=resolver,
                noise_filter=noise_filter,
                analyzer=ExceptionFlowAnalyzer(extractor, resolver),
            ),
        )
        self.register_singleton(
            "SubstitutionRule",
            SubstitutionRule(config_loader, extractor=extractor, resolver=resolver, noise_filter=noise_filter),
        )
        self.register_singleton(
            "EventHandlerRule",
            EventHandlerRule(config_loader, extractor=extractor, resolver=resolver, noise_filter=noise_filter),
        )

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        """Return the configuration loader (created at composition root)."""
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_guidance_service(self) -> GuidanceService:
        """Return the guidance service (rule registry)."""
        return cast(GuidanceService, self.get("GuidanceService"))

    def get_astroid_gateway(self) -> "AstroidGatewayProtocol":
        return cast("AstroidGatewayProtocol", self.get("AstroidGateway"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_fixer_gateway(self) -> "FixerGatewayProtocol":
        """Return the LibCST fixer gateway."""
        return cast("FixerGatewayProtocol", self.get("LibCSTFixerGateway"))

    def get_unhandled_rule(self) -> UnhandledExceptionRule:
        return cast(UnhandledExceptionRule, self.get("UnhandledExceptionRule"))

    def get_substitution_rule(self) -> SubstitutionRule:
        return cast(SubstitutionRule, self.get("SubstitutionRule"))

    def get_event_handler_rule(self) -> EventHandlerRule:
        return cast(EventHandlerRule, self.get("EventHandlerRule"))

    def get_rules(self) -> list[UnhandledExceptionRule | SubstitutionRule | EventHandlerRule]:
        """All rules in reporting order."""
        return [self.get_unhandled_rule(), self.get_substitution_rule(), self.get_event_handler_rule()]

    @classmethod
    def get_instance(cls) -> "CheckedExceptionsContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = CheckedExceptionsContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
