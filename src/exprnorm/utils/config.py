"""
Configuration constants to replace magic numbers and strings throughout exprnorm
"""

# Accessor naming convention (special-name methods backing properties and indexers)
GETTER_PREFIX = "get_"
SETTER_PREFIX = "set_"
DEFAULT_INDEXER_NAME = "Item"  # get_Item / set_Item back the default indexer

# S-expression formatting constants
SEXPR_MAX_LINE = 100  # Keep forms on one line up to this width
SEXPR_INDENT = "  "

# Error reporting constants
PRECONDITION_VIOLATION_CODE = "E0601"
IMPLEMENTATION_ERROR_CODE = "E9999"
ERROR_NOTE_PREFIX = "= "
