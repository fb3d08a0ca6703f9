"""Constants used by the Jira fetcher mixins."""

REST_API_PATH = "/rest/api/3"

# Fields requested for every normalized issue; the designated custom
# fields (story points, epic link) are appended from the config.
DEFAULT_ISSUE_FIELDS: tuple[str, ...] = (
    "id",
    "key",
    "summary",
    "description",
    "status",
    "created",
    "updated",
    "parent",
    "subtasks",
    "issuelinks",
)

DEFAULT_ISSUE_EXPAND = "names,renderedFields"

SEARCH_MAX_RESULTS = 50
EPIC_CHILDREN_MAX_RESULTS = 100

DEFAULT_STORY_ISSUE_TYPE = "Story"

# Lowercase substrings matched against field names in create metadata.
STORY_POINTS_NAME_HINTS: tuple[str, ...] = (
    "story points",
    "storypoints",
    "story point estimate",
    "estimate",
    "points",
)

# Ids commonly used for story points, probed in this order.
COMMON_STORY_POINTS_FIELD_IDS: tuple[str, ...] = (
    "customfield_10002",
    "customfield_10016",
    "customfield_10020",
    "customfield_10026",
    "customfield_10004",
    "customfield_10008",
)
