"""
Registry for SAT backends.
Implements a simple registry pattern for registering and creating backends by name.
"""

import importlib
import inspect
import logging
import os
import pkgutil
from collections.abc import Callable

from ..utils.exceptions import ConfigurationError
from .base import SolverBase

# Set up logging
logger = logging.getLogger(__name__)


class SolverRegistry:
    """
    Registry for SAT backends.
    Enables registering backends by name and retrieving them later.
    """

    _registry: dict[str, type[SolverBase]] = {}

    @classmethod
    def register(cls, name: str, solver_cls: type[SolverBase]) -> None:
        """
        Register a backend with the given name.

        Args:
            name: Name of the backend
            solver_cls: Backend class (must inherit from SolverBase)
        """
        if not (inspect.isclass(solver_cls) and issubclass(solver_cls, SolverBase)):
            raise TypeError(
                f"Solver class {solver_cls!r} must inherit from SolverBase"
            )

        existing = cls._registry.get(name)
        if existing is solver_cls:
            return
        if existing is not None:
            logger.warning(f"Overriding existing solver registration for '{name}'")

        cls._registry[name] = solver_cls

    @classmethod
    def register_as(cls, name: str) -> Callable[[type[SolverBase]], type[SolverBase]]:
        """
        Decorator to register a backend with the given name.

        Args:
            name: Name of the backend

        Returns:
            Decorator function that registers the backend
        """

        def decorator(solver_cls: type[SolverBase]) -> type[SolverBase]:
            solver_cls.solver_name = name
            cls.register(name, solver_cls)
            return solver_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type[SolverBase]:
        """
        Get a backend class by name.

        Args:
            name: Name of the backend

        Returns:
            Backend class
        """
        if name not in cls._registry:
            raise ConfigurationError(
                f"No solver registered with name '{name}' "
                f"(available: {', '.join(cls.list_solvers()) or 'none'})"
            )

        return cls._registry[name]

    @classmethod
    def list_solvers(cls) -> list[str]:
        """
        List all registered backends.

        Returns:
            List of backend names
        """
        return list(cls._registry.keys())

    @classmethod
    def create(cls, name: str, **kwargs) -> SolverBase:
        """
        Create a new instance of the specified backend.

        Args:
            name: Name of the backend
            **kwargs: Arguments to pass to the backend constructor

        Returns:
            Instance of the backend
        """
        solver_cls = cls.get(name)
        logger.debug(f"Creating solver '{name}' with {kwargs}")
        return solver_cls(**kwargs)

    @classmethod
    def auto_discover(cls) -> None:
        """
        Import every module of this package and register the concrete
        SolverBase subclasses found in them.
        """
        package_dir = os.path.dirname(__file__)

        for _, module_name, is_pkg in pkgutil.iter_modules([package_dir]):
            if is_pkg or module_name in ("base", "registry"):
                continue

            module = importlib.import_module(f"{__package__}.{module_name}")

            for name, obj in inspect.getmembers(module, inspect.isclass):
                if (
                    issubclass(obj, SolverBase)
                    and obj is not SolverBase
                    and not inspect.isabstract(obj)
                ):
                    solver_name = getattr(obj, "solver_name", name.lower())
                    cls.register(solver_name, obj)
                    logger.debug(f"Auto-discovered solver: {solver_name}")


# Register common decorator for more concise backend registration
register_solver = SolverRegistry.register_as
