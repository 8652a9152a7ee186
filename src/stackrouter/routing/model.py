"""Context, Block and Stack: the structural model of a pathname.

Given ``blockSeparator="~"`` and ``paramSeparator="="``::

    /users/user/=123/~/edit/tab=delete/~/confirm
    contexts: |users|user=123 | |edit tab=delete| |confirm|
    blocks:   |block 0        | |block 1        | |block 2|

A ``Stack`` is a tuple of ``Block``s, a ``Block`` a non-empty tuple of
``Context``s. Both are plain tuples so they compare and hash by value.
"""

from dataclasses import dataclass, field

from stackrouter.routing.params import Params


@dataclass(frozen=True, slots=True)
class Context:
    """A named unit of a pathname with its properties.

    ``/users/=male/age=45`` is ``Context("users", Params({"": "male", "age": "45"}))``.
    """

    name: str
    properties: Params = field(default_factory=Params)

    def __post_init__(self) -> None:
        if not self.name:
            msg = "Context name must be a non-empty string"
            raise ValueError(msg)
        if not isinstance(self.properties, Params):
            object.__setattr__(self, "properties", Params(self.properties))

    def __getitem__(self, key: str) -> str:
        return self.properties[key]

    def __contains__(self, key: object) -> bool:
        return key in self.properties

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the property *key*, or *default* if missing."""
        return self.properties.get(key, default)


type Block = tuple[Context, ...]
type Stack = tuple[Block, ...]
