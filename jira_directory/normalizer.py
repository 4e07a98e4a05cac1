"""Maps raw Jira directory records onto the canonical user and group shapes."""

USER = "user"
USER_MIN = "userMin"
GROUP = "group"
GROUP_MIN = "groupMin"

RECORD_FIELDS = {
    USER: ("name", "displayName", "accountId", "active", "emailAddress"),
    USER_MIN: ("name", "displayName", "accountId"),
    GROUP: ("name", "displayName", "active", "groupId"),
    GROUP_MIN: ("name",),
}

USER_KINDS = (USER, USER_MIN)


def user_kind(minimal):
    return USER_MIN if minimal else USER


def group_kind(minimal):
    return GROUP_MIN if minimal else GROUP


def username_or_account_id(raw_record):
    """accountId when it is a non-empty string, otherwise name."""
    account_id = raw_record.get('accountId')
    if isinstance(account_id, str) and account_id:
        return account_id
    name = raw_record.get('name')
    return name if name is not None else ""


def normalize(kind, raw_record):
    """
    Builds a canonical record of the given kind from one raw record.

    Fields missing from the raw record are left out of the result rather than
    filled with defaults. User kinds always get `usernameOrAccountId`.
    """
    if kind not in RECORD_FIELDS:
        raise ValueError(f"Unknown record kind '{kind}'.")
    record = {field: raw_record[field] for field in RECORD_FIELDS[kind] if field in raw_record}
    if kind in USER_KINDS:
        record['usernameOrAccountId'] = username_or_account_id(raw_record)
    return record


def normalize_all(kind, raw_records):
    return [normalize(kind, raw_record) for raw_record in raw_records]


def _all_mappings(items):
    return all(isinstance(item, dict) for item in items)


# --- Shape validation ---
# Each helper returns the record list, or None when the payload does not
# have the expected structure.

def user_list_from_payload(payload):
    if not isinstance(payload, list) or not _all_mappings(payload):
        return None
    return payload


def group_list_from_payload(payload):
    if not isinstance(payload, dict):
        return None
    groups = payload.get('groups')
    if not isinstance(groups, list) or not _all_mappings(groups):
        return None
    return groups


def member_page_from_payload(payload):
    if not isinstance(payload, dict):
        return None
    values = payload.get('values')
    if not isinstance(values, list) or not _all_mappings(values):
        return None
    return values
