"""
State-based method dispatch (a.k.a. "control-path" templating) via decorators.

This module provides a small mechanism for routing a single method call to
one of several registered implementations based on the runtime value of a
named attribute on the receiving object.

Core idea
---------
- You define a *base* method on a class (its signature becomes the canonical
  one).
- You then register multiple "control paths" for that method, each keyed by:
    (ClassName, MethodName, StateVal)
- At runtime, the wrapper reads the configured state attribute from `self`
  and dispatches to the implementation registered for that value.

In lazynd the state is the traversal `layout` of an iterator: stepping a
cursor forward or backward is a different coordinate update for row-major
and column-major order, and each order is registered as its own path.

Important notes
---------------
- The first time a control path is registered, the base method on the class
  is replaced with a dispatching wrapper.
- Registered implementations are stored in a closure-local mapping owned by
  `create_path_builder()`. Different builders do not share mappings.
- Implementations receive `self` as their first argument, like ordinary
  instance methods.
"""

from functools import wraps
from collections import namedtuple
from typing import Any, Callable, Dict, Hashable, Optional, Type, Union

from typing_extensions import ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")

TrapException = Optional[Union[Type[Exception], Callable[[Callable, Any], None]]]


def create_path_builder(
    state_attribute: str,
) -> Callable[
    [Type, Callable[P, R], Hashable, TrapException],
    Callable[[Callable[P, R]], Callable[P, R]],
]:
    """
    Create and return a "path builder" used to register control paths.

    Parameters
    ----------
    state_attribute : str
        Name of the attribute (or property) read from the receiving object to
        select the implementation.

    Returns
    -------
    Callable
        A function with signature:

            (cls, method, state, trap_exception=None) -> decorator

        where `decorator(sub_method)` registers `sub_method` for that control
        path and installs a dispatcher on `cls` under `method.__name__`.

    Examples
    --------
    >>> path = create_path_builder("mode")
    >>> class Machine:
    ...     mode = "a"
    ...     def run(self) -> str: ...
    >>> @path(Machine, Machine.run, "a")
    ... def run_a(self) -> str:
    ...     return "ran a"
    >>> Machine().run()
    'ran a'
    """

    MethodKey = namedtuple("MethodKey", ["ClassName", "MethodName", "StateVal"])

    methods_map: Dict[MethodKey, Callable] = {}
    """Mapping from (class, method, state) keys to registered implementations."""

    _missing = object()

    def templator(
        cls: Type,
        method: Callable[P, R],
        state: Hashable,
        trap_exception: TrapException = None,
    ) -> Callable[[Callable[P, R]], Callable[P, R]]:
        """
        Build a decorator that registers a control path implementation.

        Parameters
        ----------
        cls : Type
            The class whose method should be wrapped for state-based dispatch.
        method : Callable[P, R]
            The base method being templated. Its metadata is copied onto the
            installed wrapper via `functools.wraps`.
        state : Hashable
            The state value that selects the decorated implementation.
        trap_exception : Optional[Union[Type[Exception], Callable]]
            Controls what happens when no path matches the current state:

            - If `None`, the wrapper raises `NotImplementedError`.
            - If an exception class, the wrapper raises it.
            - If another callable, it is invoked as
              `trap_exception(method, state)` and `NotImplementedError` is
              raised afterwards.

        Raises
        ------
        TypeError
            If `state` is not hashable.
        """
        try:
            hash(state)
        except TypeError:
            raise TypeError(
                f"The argument for 'state' must be hashable. Got {state!r}"
            ) from None

        # The wrapped method may already be a dispatcher installed by an
        # earlier registration; key on the original name either way.
        method_name = method.__name__
        smk = MethodKey(cls.__name__, method_name, state)

        def decorator(sub_method: Callable[P, R]) -> Callable[P, R]:
            """
            Register `sub_method` for the configured state and install the
            dispatcher on `cls`.
            """
            methods_map[smk] = sub_method

            @wraps(method)
            def wrapper(self: Any, *args: P.args, **kwargs: P.kwargs) -> Any:
                current = getattr(self, state_attribute, _missing)
                if current is _missing:
                    raise NotImplementedError(
                        "{} is missing attribute {}".format(
                            type(self), repr(state_attribute)
                        )
                    )
                sm = methods_map.get(MethodKey(cls.__name__, method_name, current))
                if sm is not None:
                    return sm(self, *args, **kwargs)
                if trap_exception is None:
                    raise NotImplementedError(
                        "Missing control path ({}={}) for {}".format(
                            state_attribute, repr(current), method_name
                        )
                    )
                if isinstance(trap_exception, type) and issubclass(
                    trap_exception, Exception
                ):
                    raise trap_exception(
                        f"{method_name} is not available for "
                        f"{state_attribute}={current!r}"
                    )
                trap_exception(method, current)
                raise NotImplementedError(
                    "Missing control path ({}={}) for {}".format(
                        state_attribute, repr(current), method_name
                    )
                )

            setattr(cls, method_name, wrapper)
            return sub_method

        return decorator

    return templator
