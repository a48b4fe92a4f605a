"""
Parameter Bag Helpers

Engines receive parameters as a JSON-like dict. require_param is the strict
lookup; the param_* helpers wrap it and fall back to a caller default when
the bag is not a dict, the key is missing, the value is null, or the type
is wrong. They never raise.

JSON booleans are not numbers here, even though bool subclasses int in
Python: {"feed_rate": true} falls back to the default.
"""

from .errors import ParamNotFoundError, ParamTypeMismatchError


def _is_number(v):
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _is_unsigned(v):
    return isinstance(v, int) and not isinstance(v, bool) and v >= 0


# kind -> (predicate, converter)
_KINDS = {
    "number": (_is_number, float),
    "integer": (_is_unsigned, int),
    "boolean": (lambda v: isinstance(v, bool), bool),
    "string": (lambda v: isinstance(v, str), str),
}


def _json_type(v):
    if v is None:
        return "null"
    if isinstance(v, bool):
        return "boolean"
    if isinstance(v, int):
        return "integer"
    if isinstance(v, float):
        return "number"
    if isinstance(v, str):
        return "string"
    if isinstance(v, (list, tuple)):
        return "array"
    if isinstance(v, dict):
        return "object"
    return type(v).__name__


def require_param(params, name, kind):
    """Strict lookup of params[name] as `kind`.

    Args:
        params: parameter dict
        name: key to look up
        kind: "number", "integer" (non-negative), "boolean" or "string"

    Raises:
        ParamNotFoundError: params is not a dict, or the key is missing / null
        ParamTypeMismatchError: the value has the wrong type
    """
    if not isinstance(params, dict) or params.get(name) is None:
        raise ParamNotFoundError(name)
    value = params[name]
    check, convert = _KINDS[kind]
    if not check(value):
        raise ParamTypeMismatchError(name, kind, _json_type(value))
    return convert(value)


def _lenient(params, name, kind, default):
    try:
        return require_param(params, name, kind)
    except (ParamNotFoundError, ParamTypeMismatchError):
        return default


def param_float(params, name, default):
    """params[name] as float (ints accepted), else default."""
    return _lenient(params, name, "number", default)


def param_int(params, name, default):
    """params[name] as a non-negative int, else default."""
    return _lenient(params, name, "integer", default)


def param_bool(params, name, default):
    return _lenient(params, name, "boolean", default)


def param_str(params, name, default):
    return _lenient(params, name, "string", default)
