""" Module for dynamically importing optional entry points. """

from typing import Any, Callable


class EntryPoint:
    """ Entry point for an optional tool. Modules are imported only when resolved, so probing one tool never
        drags in the dependencies of another. """

    def __init__(self, module_name:str, func_name:str, description="Unknown function.") -> None:
        self._module_name = module_name  # Full name of module to import.
        self._func_name = func_name      # Name of callable to execute in the module.
        self._description = description  # Textual description when the user looks for help.

    def resolve(self) -> Callable[..., Any]:
        """ Import the module and return the named callable. Raises ImportError/AttributeError if it isn't there. """
        attr = self._func_name
        module = __import__(self._module_name, fromlist=[attr])
        return getattr(module, attr)

    def __call__(self, *args, **kwargs) -> Any:
        """ Resolve the callable, call it, and return the result (usually an exit code). """
        func = self.resolve()
        return func(*args, **kwargs)

    def description(self) -> str:
        return self._description

    def __repr__(self) -> str:
        return f"{self._module_name}:{self._func_name}"
