"""
Schema Normalizer - turn an untrusted parsed value into a fully populated record.

A schema is a tree of field descriptors:

    SCHEMA = Obj({
        "score": Number(default=50, integer=True),
        "skills": Array(Text()),
        "subjects": Array(Obj({"name": Text("Unknown Subject"), "score": Number(0)})),
    })

normalize(parsed, SCHEMA) never fails. Each field keeps the parsed value when it
has the right type and takes its declared default otherwise, so the output
always has the schema's shape.
"""
import copy
import math
from typing import Any, Callable, Dict, Optional


class Field:
    """Base descriptor. Subclasses decide what they accept and how to convert it."""

    def __init__(self, default: Any = None):
        self._default = default

    def default(self) -> Any:
        if callable(self._default):
            return self._default()
        return copy.deepcopy(self._default)

    def accepts(self, value: Any) -> bool:
        raise NotImplementedError

    def convert(self, value: Any) -> Any:
        return value

    def coerce(self, value: Any) -> Any:
        if self.accepts(value):
            return self.convert(value)
        return self.default()


class Number(Field):
    """
    Numeric field. Numeric-looking strings ("8.5", " 90 ") are parsed;
    anything else (bools, NaN, ints too large for a float, "N/A") falls back
    to the default.
    """

    def __init__(self, default: Optional[float] = 0, integer: bool = False,
                 minimum: Optional[float] = None, maximum: Optional[float] = None):
        super().__init__(default)
        self.integer = integer
        self.minimum = minimum
        self.maximum = maximum

    def _parse(self, value: Any) -> Optional[float]:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            try:
                number = float(value)
            except OverflowError:
                return None
        elif isinstance(value, str):
            try:
                number = float(value.strip().rstrip("%"))
            except ValueError:
                return None
        else:
            return None
        if not math.isfinite(number):
            return None
        return number

    def accepts(self, value: Any) -> bool:
        return self._parse(value) is not None

    def convert(self, value: Any) -> Any:
        number = self._parse(value)
        if self.minimum is not None:
            number = max(self.minimum, number)
        if self.maximum is not None:
            number = min(self.maximum, number)
        if self.integer:
            return int(round(number))
        if isinstance(value, int) and not isinstance(value, bool) and number == value:
            return value
        return number


class Text(Field):
    """String field. Blank strings count as missing."""

    def __init__(self, default: Optional[str] = ""):
        super().__init__(default)

    def accepts(self, value: Any) -> bool:
        return isinstance(value, str) and bool(value.strip())

    def convert(self, value: str) -> str:
        return value.strip()


class Array(Field):
    """
    List field. With an item descriptor, items of the wrong type are dropped
    and the rest are normalized; without one the list is copied as-is.
    """

    def __init__(self, item: Optional[Field] = None, default: Callable[[], list] = list):
        super().__init__(default)
        self.item = item

    def accepts(self, value: Any) -> bool:
        return isinstance(value, list)

    def convert(self, value: list) -> list:
        if self.item is None:
            return list(value)
        return [self.item.convert(v) for v in value if self.item.accepts(v)]


class Obj(Field):
    """Nested object with a fixed set of fields. Unknown keys are dropped."""

    def __init__(self, fields: Dict[str, Field]):
        super().__init__(None)
        self.fields = fields

    def default(self) -> dict:
        return {name: f.default() for name, f in self.fields.items()}

    def accepts(self, value: Any) -> bool:
        return isinstance(value, dict)

    def convert(self, value: dict) -> dict:
        return {name: f.coerce(value.get(name)) for name, f in self.fields.items()}


def normalize(parsed: Any, schema: Obj) -> dict:
    """Return a dict with every field of `schema`, whatever `parsed` looks like."""
    return schema.coerce(parsed)
