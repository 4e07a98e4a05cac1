import os

USER_SELECT_GROUP = os.getenv("USER_SELECT_GROUP", "PMO")

DEFAULT_MAX_RESULTS = 100
GROUP_MEMBER_PAGE_SIZE = 50

# Named remote operations and the Jira REST paths they resolve to.
OPERATIONS = {
    "userSearch": {
        "path": "/rest/api/2/user/search",
        "description": "Jira Server/DC user search, takes 'username'.",
    },
    "userSearchByQuery": {
        "path": "/rest/api/3/user/search",
        "description": "Jira Cloud user search, takes 'query'.",
    },
    "assignableUserSearch": {
        "path": "/rest/api/2/user/assignable/search",
        "description": "Users assignable to issues in a project.",
    },
    "groupSearch": {
        "path": "/rest/api/2/groups/picker",
        "description": "Group picker, returns a wrapper with a 'groups' list.",
    },
    "groupMembers": {
        "path": "/rest/api/2/group/member",
        "description": "Paginated members of a single group.",
    },
}

# Every option accepted by the search operations, with its default.
SEARCH_DEFAULTS = {
    "term": "",                 # empty matches everyone
    "minimal": False,           # reduced record fields
    "max_results": DEFAULT_MAX_RESULTS,
    "method_override": None,    # alternate user search operation, sends 'query'
}
