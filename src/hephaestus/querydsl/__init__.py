"""Query DSL module.

Exports `Q` for composing filters with `field__lookup=value` keywords and
`build_key_condition` for index key conditions. Native DynamoDB predicates
are produced by the `compilers` subpackage.
"""

from .keys import build_key_condition
from .q import Q

__all__ = ("Q", "build_key_condition")
