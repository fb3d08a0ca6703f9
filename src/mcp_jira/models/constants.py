"""
Default values shared by the Jira models.
"""

EMPTY_STRING = ""
JIRA_DEFAULT_ID = "0"
JIRA_DEFAULT_KEY = "UNKNOWN-0"
