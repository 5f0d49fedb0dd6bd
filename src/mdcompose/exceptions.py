#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the mdcompose library.

This module defines specialized exception classes for the error conditions
that can occur while parsing markdown, resolving image resources and
composing documents.

Exception Hierarchy
-------------------
- MdComposeError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for a component)

  - ParsingError (markdown parsing failures)

  - RenderingError (unsupported node kinds, output generation failures)

  - SecurityError (security violations)
    - NetworkSecurityError (disallowed or failed remote fetches)
    - PathSecurityError (local paths escaping the safe root)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any


class MdComposeError(Exception):
    """Base exception class for all mdcompose-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(MdComposeError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an options object of the wrong class is supplied.

    Parameters
    ----------
    component_name : str
        Name of the component that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        component_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{component_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(MdComposeError):
    """Exception raised when markdown input cannot be turned into a document tree.

    Parameters
    ----------
    message : str
        Description of the parsing error
    parsing_stage : str, optional
        Stage where parsing failed (e.g., "loading", "tokenizing", "tree_building")
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error with stage information."""
        super().__init__(message, original_error=original_error)
        self.parsing_stage = parsing_stage


class RenderingError(MdComposeError):
    """Exception raised when a document tree cannot be composed or written.

    Unsupported block kinds are a parser/renderer contract violation and are
    reported with this exception instead of being dropped.

    Parameters
    ----------
    message : str
        Description of the rendering error
    rendering_stage : str, optional
        Stage where rendering failed (e.g., "block_dispatch", "pdf_build")
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error with stage information."""
        super().__init__(message, original_error=original_error)
        self.rendering_stage = rendering_stage


class SecurityError(MdComposeError):
    """Base exception for security violations."""

    pass


class NetworkSecurityError(SecurityError):
    """Exception raised when a remote fetch is disallowed or fails its constraints.

    Examples include unsupported URL schemes, hosts outside the allowlist,
    globally disabled networking and oversized responses.

    """

    pass


class PathSecurityError(SecurityError):
    """Exception raised when a local reference escapes its safe root.

    Parameters
    ----------
    message : str
        Description of the violation
    reference : str, optional
        The offending reference string
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, reference: str | None = None, original_error: Exception | None = None):
        """Initialize the path security error with the offending reference."""
        super().__init__(message, original_error=original_error)
        self.reference = reference


class DependencyError(MdComposeError):
    """Exception raised when required dependencies are missing or incompatible.

    Parameters
    ----------
    component_name : str
        Name of the component that requires the dependencies
    missing_packages : list of tuple
        List of (package_name, version_spec) for missing packages
    version_mismatches : list of tuple, optional
        List of (package_name, required_version, installed_version)
    message : str, optional
        Custom error message. If not provided, generates one
    original_import_error : ImportError, optional
        The original import error, for debugging

    """

    def __init__(
        self,
        component_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{component_name} requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{component_name} has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
            if all_packages:
                packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message, original_error=original_import_error)
        self.component_name = component_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.original_import_error = original_import_error
