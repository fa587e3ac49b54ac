"""
Lox Runtime Objects - Functions, classes and instances

Callable values:
- NativeFunction: a Python callable exposed to Lox (only `clock` by default)
- LoxFunction: a user function or method, closing over its declaring scope
- LoxClass: a name plus a method table; calling it constructs an instance

An instance keeps its own field map. Reading a property checks the fields
first, then the class's methods; a method found that way is bound to the
instance through a fresh one-entry scope holding `this`.
"""

from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from . import ast_nodes as ast
from .environment import Environment
from .errors import UndefinedProperty
from .tokens import Token, TokenType

if TYPE_CHECKING:
    from .interpreter import Interpreter
    from .resolver import ResolutionTable


class LoxCallable:
    """Base class for every value a Lox call expression accepts"""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        raise NotImplementedError


class NativeFunction(LoxCallable):
    """Host function with a fixed arity"""

    def __init__(self, name: str, arity: int, fn: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter, arguments):
        return self.fn(*arguments)

    def __str__(self) -> str:
        return "<native fn>"

    def __repr__(self) -> str:
        return f"NativeFunction({self.name!r}, arity={self._arity})"


class LoxFunction(LoxCallable):
    """User-defined function or method"""

    def __init__(self, declaration: ast.Function, closure: Environment,
                 locals: 'ResolutionTable', is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        # Distances for the body come from the run that declared it
        self.locals = locals
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def bind(self, instance: 'LoxInstance') -> 'LoxFunction':
        """Return a copy of this method whose closure defines `this`"""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.locals, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        completion = interpreter.execute_body(self.declaration.body, environment, self.locals)

        # init always yields the instance, whatever it returned
        if self.is_initializer:
            this = Token(TokenType.THIS, "this", None, self.declaration.name.line)
            return self.closure.get_at(0, this)
        if completion is not None:
            return completion.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    def __repr__(self) -> str:
        return f"LoxFunction({self.name!r}, arity={self.arity()})"


class LoxClass(LoxCallable):
    """A flat class: name and methods, no superclass"""

    def __init__(self, name: str, methods: Dict[str, LoxFunction]):
        self.name = name
        self.methods = methods

    def find_method(self, name: str) -> Optional[LoxFunction]:
        return self.methods.get(name)

    def arity(self) -> int:
        initializer = self.find_method("init")
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter, arguments):
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"LoxClass({self.name!r}, methods={sorted(self.methods)})"


class LoxInstance:
    """Instance of a LoxClass with lazily populated fields"""

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise UndefinedProperty(name)

    def set(self, name: Token, value: Any):
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"

    def __repr__(self) -> str:
        return f"LoxInstance({self.klass.name!r}, fields={sorted(self.fields)})"


__all__ = ['LoxCallable', 'NativeFunction', 'LoxFunction', 'LoxClass', 'LoxInstance']
