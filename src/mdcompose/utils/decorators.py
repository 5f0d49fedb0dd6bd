#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/utils/decorators.py
"""Utility decorators for mdcompose components.

This module provides the dependency-checking decorator shared by the
parser, the resource resolver and the PDF backend, plus a DEBUG-level
timing helper.

"""

from __future__ import annotations

import importlib
import inspect
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Tuple

from mdcompose.exceptions import DependencyError
from mdcompose.utils.packages import check_version_requirement


def requires_dependencies(component_name: str, packages: List[Tuple[str, str, str]]) -> Callable:
    """Check required dependencies and versions before function execution.

    Parameters
    ----------
    component_name : str
        Name of the component (e.g., "markdown", "pdf_render"). This appears
        in error messages to help users identify which feature needs dependencies.
    packages : list of tuple
        Required packages as (install_name, import_name, version_spec) tuples where:
        - install_name: Package name for pip install (e.g., "Pillow")
        - import_name: Module name for import statement (e.g., "PIL")
        - version_spec: Version requirement (e.g., ">=9.0.0" or "" for any version)

    Returns
    -------
    Callable
        Decorated function that checks dependencies before execution

    Raises
    ------
    DependencyError
        If any required package is missing or has an incompatible version.

    Examples
    --------
        >>> @requires_dependencies("pdf_render", [("reportlab", "reportlab", ">=4.0.0")])
        ... def write_pdf(self, layout, output):
        ...     from reportlab.platypus import SimpleDocTemplate
        ...     # rendering logic here

    Notes
    -----
    Coroutine functions are wrapped with an async wrapper so the check runs
    when the coroutine is awaited rather than when it is created.

    """

    def _check() -> None:
        missing = []
        version_mismatches = []
        original_error = None

        for install_name, import_name, version_spec in packages:
            try:
                # nosemgrep: python.lang.security.audit.non-literal-import.non-literal-import
                importlib.import_module(import_name)
            except ImportError as e:
                missing.append((install_name, version_spec))
                if original_error is None:
                    original_error = e
                continue

            if version_spec:
                meets_requirement, installed_version = check_version_requirement(install_name, version_spec)
                if not meets_requirement:
                    version_mismatches.append((install_name, version_spec, installed_version or "unknown"))

        if missing or version_mismatches:
            raise DependencyError(
                component_name=component_name,
                missing_packages=missing,
                version_mismatches=version_mismatches,
                original_import_error=original_error,
            ) from original_error

    def decorator(method: Callable) -> Callable:
        if inspect.iscoroutinefunction(method):

            @wraps(method)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                _check()
                return await method(*args, **kwargs)

            return async_wrapper

        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            _check()
            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Time a block of code and log the elapsed time at DEBUG level.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance to use for DEBUG messages
    operation : str
        Description of the operation being timed (e.g., "Composing document")

    Yields
    ------
    None
        Control flow to the code block being timed

    Examples
    --------
        >>> with debug_timer(logger, "Parsing markdown"):
        ...     document = parser.parse(text)
        ... # Logs: "Parsing markdown completed in 0.01s" at DEBUG level

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.2f}s")
    else:
        yield
