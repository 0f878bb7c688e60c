"""
Defaults and reserved query-string keys for the grid state protocol.
"""

# Default starting page number for pagination
DEFAULT_PAGE = 1

# Default number of rows per page
DEFAULT_LIMIT = 10

SORT_ASC = "asc"
SORT_DESC = "desc"

PAGE_PARAM = "page"
LIMIT_PARAM = "limit"
SORT_PARAM = "sort"
ORDER_PARAM = "order"
SELECTED_PARAM = "selected"

# Keys owned by the codec; the command key comes from GridConfig.command_param
STATE_PARAMS = (PAGE_PARAM, LIMIT_PARAM, SORT_PARAM, ORDER_PARAM, SELECTED_PARAM)
