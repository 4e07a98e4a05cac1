from flask import Blueprint, current_app, jsonify, request
from jira import JIRA, JIRAError

from . import search
from .config import OPERATIONS, SEARCH_DEFAULTS
from .dispatcher import RequestDispatcher
from .utils import parse_bool, parse_positive_int

bp = Blueprint('main', __name__)


class ClientUnavailable(Exception):
    pass


# --- Helper to get a dispatcher over an authenticated Jira client ---
def get_dispatcher():
    """Creates a RequestDispatcher for the Jira instance in the app config."""
    server = current_app.config.get('JIRA_SERVER')
    email = current_app.config.get('JIRA_EMAIL')
    token = current_app.config.get('JIRA_API_TOKEN')
    if not server or not email or not token:
        raise ClientUnavailable("JIRA_SERVER, JIRA_EMAIL and JIRA_API_TOKEN must be configured.")
    try:
        jira_client = JIRA(
            options={'server': server},
            basic_auth=(email, token),
            max_retries=0,
            timeout=current_app.config.get('JIRA_TIMEOUT'),
            get_server_info=False,
        )
    except JIRAError as e:
        current_app.logger.error(f"Failed to create JIRA client: {e.status_code} - {e.text}")
        raise ClientUnavailable(f"Failed to connect to Jira: {e.text} (Status: {e.status_code}).")
    return RequestDispatcher(jira_client)


@bp.errorhandler(ClientUnavailable)
def client_unavailable(e):
    current_app.logger.error(f"Jira client unavailable: {e}")
    return jsonify({'error': str(e)}), 503


def _search_options():
    return {
        'term': request.args.get('term', SEARCH_DEFAULTS['term']),
        'minimal': parse_bool(request.args.get('minimal')),
        'max_results': parse_positive_int(request.args.get('maxResults'), SEARCH_DEFAULTS['max_results']),
    }


@bp.route('/health')
def health():
    return jsonify({'status': 'ok'})


@bp.route('/api/users/search')
def users_search():
    method_override = request.args.get('method') or None
    if method_override is not None and method_override not in OPERATIONS:
        current_app.logger.warning(f"Rejected user search with unregistered method '{method_override}'")
        return jsonify({'error': f"Unknown search method '{method_override}'."}), 400
    dispatcher = get_dispatcher()
    options = _search_options()
    try:
        users = search.search_users(dispatcher, method_override=method_override,
                                    sink=current_app.logger, **options)
    finally:
        dispatcher.close()
    current_app.logger.info(f"User search for '{options['term']}' returned {len(users)} users.")
    return jsonify(users)


@bp.route('/api/groups/search')
def groups_search():
    dispatcher = get_dispatcher()
    options = _search_options()
    try:
        groups = search.search_groups(dispatcher, sink=current_app.logger, **options)
    finally:
        dispatcher.close()
    current_app.logger.info(f"Group search for '{options['term']}' returned {len(groups)} groups.")
    return jsonify(groups)


@bp.route('/api/groups/<group_name>/members')
def group_members(group_name):
    dispatcher = get_dispatcher()
    try:
        members = search.fetch_group_members(dispatcher, group_name,
                                             minimal=parse_bool(request.args.get('minimal')),
                                             sink=current_app.logger)
    finally:
        dispatcher.close()
    return jsonify(search.to_dropdown_options(members))


@bp.route('/api/dropdown/users')
def dropdown_users():
    """Members of the configured user-select group, ready for a Select2 dropdown."""
    return group_members(current_app.config['USER_SELECT_GROUP'])
