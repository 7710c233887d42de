"""Name helpers for feature menus and the rename field."""

import re

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9 ]")
_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")
_ACRONYM_WORD = re.compile(r"([A-Z])([A-Z][a-z])")


def sanitize_feature_name(name: str) -> str:
    """Keep only ASCII letters, digits and spaces: ``"Foo@#1 Bar!"`` -> ``"Foo1 Bar"``."""
    return _INVALID_NAME_CHARS.sub("", name)


def split_camel_case(text: str) -> str:
    """``ScreenSpaceAO`` -> ``Screen Space AO``, ``SSAOPass`` -> ``SSAO Pass``."""
    return _ACRONYM_WORD.sub(r"\1 \2", _LOWER_UPPER.sub(r"\1 \2", text))


def menu_name_for_type(type_name: str, experimental: bool = False,
                       experimental_suffix: str = " (Experimental)") -> str:
    path = split_camel_case(type_name)
    if experimental:
        path += experimental_suffix
    return path
