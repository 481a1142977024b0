"""Built-in templates."""

from .defaults import BUILT_IN_DOC_TYPES, DEFAULT_TEMPLATES, get_builtin_template

__all__ = ["BUILT_IN_DOC_TYPES", "DEFAULT_TEMPLATES", "get_builtin_template"]
