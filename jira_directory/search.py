"""
User and group lookups against the Jira directory.

The public operations never raise. Transport failures and responses with an
unexpected shape are reported to the diagnostic sink (anything with an
``error(fmt, *args)`` method, a logger by default) and turned into an empty
list, so "no matches" and "lookup failed" look the same to the caller.
"""
import logging
from collections import namedtuple

from .config import SEARCH_DEFAULTS, GROUP_MEMBER_PAGE_SIZE
from .normalizer import (
    group_kind,
    group_list_from_payload,
    member_page_from_payload,
    normalize_all,
    user_kind,
    user_list_from_payload,
)
from .utils import parse_positive_int, strip_wildcards

logger = logging.getLogger(__name__)

DEFAULT_USER_OPERATION = "userSearch"
GROUP_OPERATION = "groupSearch"
GROUP_MEMBERS_OPERATION = "groupMembers"


class SearchQuery(namedtuple("SearchQuery", ["term", "minimal", "max_results", "method_override"])):
    __slots__ = ()

    @classmethod
    def build(cls, **options):
        """Merges options over SEARCH_DEFAULTS; invalid values fall back to the default."""
        params = SEARCH_DEFAULTS.copy()
        params.update({key: value for key, value in options.items() if key in SEARCH_DEFAULTS})
        term = params['term']
        method_override = params['method_override']
        if not isinstance(method_override, str) or not method_override:
            method_override = None
        return cls(
            term="" if term is None else str(term),
            minimal=bool(params['minimal']),
            max_results=parse_positive_int(params['max_results'], SEARCH_DEFAULTS['max_results']),
            method_override=method_override,
        )


class SearchError(namedtuple("SearchError", ["status_code", "messages"])):
    __slots__ = ()

    @classmethod
    def from_failure(cls, outcome):
        payload = outcome.payload if isinstance(outcome.payload, dict) else {}
        error_messages = payload.get('errorMessages')
        if isinstance(error_messages, str):
            error_messages = [error_messages]
        elif not isinstance(error_messages, list):
            error_messages = []
        messages = [str(m) for m in error_messages]
        errors = payload.get('errors')
        if isinstance(errors, dict):
            messages.extend(str(m) for m in errors.values())
        if not messages:
            messages = [f"HTTP {outcome.status_code}"]
        return cls(outcome.status_code, messages)


def _report_failure(sink, label, outcome):
    error = SearchError.from_failure(outcome)
    sink.error("%s failed with status %s: %s", label, error.status_code, "; ".join(error.messages))


def _report_shape_mismatch(sink, label, payload):
    sink.error("%s returned an unexpected response shape: %r", label, payload)


def user_search_params(query):
    """Server user search takes 'username'; the override endpoints take 'query'."""
    term_key = 'query' if query.method_override else 'username'
    return {term_key: query.term, 'maxResults': query.max_results}


def group_search_params(query):
    return {'query': strip_wildcards(query.term), 'maxResults': query.max_results}


def search_users(dispatcher, term="", minimal=False, max_results=SEARCH_DEFAULTS['max_results'],
                 method_override=None, sink=None):
    """
    Looks up users matching `term`.

    Dispatches to `method_override` when given, else to the default user
    search. Returns normalized user records in the order Jira returned them,
    or an empty list on no matches, a failed call, or a malformed response.
    """
    sink = logger if sink is None else sink
    query = SearchQuery.build(term=term, minimal=minimal, max_results=max_results,
                              method_override=method_override)
    operation = query.method_override or DEFAULT_USER_OPERATION
    outcome = dispatcher.dispatch(operation, user_search_params(query))

    if not outcome.ok:
        _report_failure(sink, f"User search '{operation}'", outcome)
        return []

    raw_users = user_list_from_payload(outcome.payload)
    if raw_users is None:
        _report_shape_mismatch(sink, f"User search '{operation}'", outcome.payload)
        return []

    return normalize_all(user_kind(query.minimal), raw_users)


def search_groups(dispatcher, term="", minimal=False, max_results=SEARCH_DEFAULTS['max_results'], sink=None):
    """Looks up groups matching `term`, with surrounding '%' wildcards removed."""
    sink = logger if sink is None else sink
    query = SearchQuery.build(term=term, minimal=minimal, max_results=max_results)
    outcome = dispatcher.dispatch(GROUP_OPERATION, group_search_params(query))

    if not outcome.ok:
        _report_failure(sink, "Group search", outcome)
        return []

    raw_groups = group_list_from_payload(outcome.payload)
    if raw_groups is None:
        _report_shape_mismatch(sink, "Group search", outcome.payload)
        return []

    return normalize_all(group_kind(query.minimal), raw_groups)


def fetch_group_members(dispatcher, group_name, minimal=False, page_size=GROUP_MEMBER_PAGE_SIZE,
                        include_inactive=False, sink=None):
    """
    Fetches every member of a Jira group, following the paginated
    /group/member endpoint until Jira reports the last page.

    Returns:
        list: normalized user records, or an empty list if any page fails.
    """
    sink = logger if sink is None else sink
    kind = user_kind(minimal)
    label = f"Group member listing for '{group_name}'"
    members = []
    start_at = 0

    while True:
        params = {
            "groupname": group_name,
            "startAt": start_at,
            "maxResults": page_size,
            "includeInactiveUsers": "true" if include_inactive else "false",
        }
        outcome = dispatcher.dispatch(GROUP_MEMBERS_OPERATION, params)
        if not outcome.ok:
            _report_failure(sink, label, outcome)
            return []

        values = member_page_from_payload(outcome.payload)
        if values is None:
            _report_shape_mismatch(sink, label, outcome.payload)
            return []

        members.extend(normalize_all(kind, values))
        if outcome.payload.get('isLast', False) or not values:
            break
        start_at += len(values)

    logger.info(f"Fetched {len(members)} members for group '{group_name}'.")
    return members


def to_dropdown_options(user_records):
    """Formats user records as [{'id': ..., 'text': displayName}] sorted by display name."""
    options = [
        {'id': record['usernameOrAccountId'], 'text': record['displayName']}
        for record in user_records
        if record.get('displayName') and record.get('usernameOrAccountId')
    ]
    options.sort(key=lambda x: x.get('text', '').lower())
    return options
