"""Error definitions for provide-cell."""

from typing import Optional, Dict, Any


class CellError(Exception):
    """Base exception for cell and container errors."""
    
    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.error_code = error_code or "CELL_ERROR"
        self.details = details or {}


class ConfigurationError(CellError):
    """Configuration related errors."""
    
    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(
            message,
            error_code="CONFIGURATION_ERROR",
            details={"config_key": config_key} if config_key else {}
        )


class RegistrationError(CellError):
    """A constructor could not be registered with a container."""
    
    def __init__(self, message: str, constructor: Optional[str] = None, error_code: Optional[str] = None):
        super().__init__(
            message,
            error_code=error_code or "REGISTRATION_ERROR",
            details={"constructor": constructor} if constructor else {}
        )
        self.constructor = constructor


class DuplicateProviderError(RegistrationError):
    """A type is already provided in the target scope."""
    
    def __init__(self, type_name: str, constructor: Optional[str] = None, existing: Optional[str] = None):
        message = f"cannot provide {constructor}: {type_name} already provided"
        if existing:
            message += f" by {existing}"
        super().__init__(message, constructor=constructor, error_code="DUPLICATE_PROVIDER")
        self.details["type"] = type_name
        self.type_name = type_name


class DependencyError(CellError):
    """Dependency resolution errors."""
    
    def __init__(self, message: str, dependency: Optional[str] = None, error_code: Optional[str] = None):
        super().__init__(
            message,
            error_code=error_code or "DEPENDENCY_ERROR",
            details={"dependency": dependency} if dependency else {}
        )


class MissingDependencyError(DependencyError):
    """No provider is visible for the requested type."""
    
    def __init__(self, dependency: str, scope: Optional[str] = None):
        message = f"missing type: {dependency}"
        if scope:
            message += f" (in scope {scope!r})"
        super().__init__(message, dependency=dependency, error_code="MISSING_DEPENDENCY")


class CircularDependencyError(DependencyError):
    """A constructor transitively depends on its own output."""
    
    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__(
            "cycle detected in dependency graph: " + " -> ".join(self.chain),
            dependency=self.chain[-1] if self.chain else None,
            error_code="CIRCULAR_DEPENDENCY"
        )


class ConstructorError(DependencyError):
    """A constructor raised while building a value."""
    
    def __init__(self, constructor: str, reason: str):
        super().__init__(
            f"constructor {constructor} failed: {reason}",
            dependency=constructor,
            error_code="CONSTRUCTOR_FAILED"
        )
        self.details["reason"] = reason
