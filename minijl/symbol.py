"""Runtime values bound to names in the symbol table.

A symbol is either the program's own function name or an integer variable:

```
function f      ; <-- 'f' is bound to Symbol.function()
x = 5           ; <-- 'x' is bound to Symbol.variable(5)
```
"""

from dataclasses import dataclass
from enum import Enum


class SymbolKind(Enum):
    FUNCTION = "function"
    VARIABLE = "variable"


@dataclass(frozen=True)
class Symbol:
    kind: SymbolKind
    value: int = 0  # always 0 for functions

    @classmethod
    def function(cls):
        return cls(SymbolKind.FUNCTION)

    @classmethod
    def variable(cls, value):
        return cls(SymbolKind.VARIABLE, value)

    @property
    def is_function(self):
        return self.kind is SymbolKind.FUNCTION

    def __str__(self):
        if self.is_function:
            return self.kind.value
        return f"{self.kind.value}({self.value})"
