"""
Core Component: Parameter Registry

Frozen defaults for every conversion call: separators, rejected
registration kinds, float specials, bool tokens, duration units, the
bytes <-> text encoding and the capability method names. Read by the
options builder, both engines, the numeric and duration codecs and the
probe.

No environment lookups, no mutation after construction.
"""

import copy

_DEFAULTS = {
    # Container tokenization (single characters, caller keeps them distinct)
    "element_separator": ";",
    "key_separator": ":",

    # Kinds that can never be the key of a registered converter.
    # Built-in handling still covers "map" natively.
    "rejected_registration_kinds": [
        "interface", "channel", "function", "pointer", "map"
    ],

    # Non-finite floats
    "float_specials": {"inf": "+Inf", "-inf": "-Inf", "nan": "NaN"},

    # Booleans
    "bool_true": ["1", "t", "T", "TRUE", "true", "True"],
    "bool_false": ["0", "f", "F", "FALSE", "false", "False"],

    # Duration unit -> nanoseconds (timedelta itself resolves microseconds)
    "duration_units": {
        "ns": 1,
        "us": 1_000,
        "µs": 1_000,  # U+00B5 micro sign
        "μs": 1_000,  # U+03BC greek mu
        "ms": 1_000_000,
        "s": 1_000_000_000,
        "m": 60_000_000_000,
        "h": 3_600_000_000_000,
    },

    # Raw bytes <-> text
    "text_encoding": "utf-8",
    "text_errors": "surrogateescape",

    # Capability method names (probe order: value, then allocated slot)
    "capability_methods": {
        "text_marshal": "marshal_text",
        "text_unmarshal": "unmarshal_text",
        "binary_marshal": "marshal_binary",
        "binary_unmarshal": "unmarshal_binary"
    }
}


def param_registry() -> dict:
    """
    Return a fresh copy of the codec defaults.

    Callers may mutate the returned dict; the next call is unaffected.

    Example:
        >>> param_registry()["element_separator"]
        ';'
    """
    return copy.deepcopy(_DEFAULTS)
