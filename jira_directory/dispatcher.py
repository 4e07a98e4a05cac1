import logging
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor

import requests
from jira import JIRAError

from .config import OPERATIONS

logger = logging.getLogger(__name__)


class Outcome(namedtuple("Outcome", ["payload", "http_meta", "status_code"])):
    """Result of a single remote call. Exactly one of Success or Failure."""
    __slots__ = ()


class Success(Outcome):
    __slots__ = ()
    ok = True


class Failure(Outcome):
    __slots__ = ()
    ok = False


def _response_meta(meta, response):
    meta = dict(meta)
    if response is None:
        return meta
    meta['headers'] = dict(getattr(response, 'headers', None) or {})
    elapsed = getattr(response, 'elapsed', None)
    if elapsed is not None:
        meta['elapsed'] = elapsed
    return meta


def _error_body(response, fallback_text):
    """Best-effort parse of a Jira error body into the errorMessages shape."""
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            return body
        text = getattr(response, 'text', None)
        if text:
            return {'errorMessages': [text]}
    return {'errorMessages': [fallback_text] if fallback_text else []}


class RequestDispatcher:
    """
    Issues one GET per dispatch against a named Jira REST operation.

    Uses the authenticated session of a `jira.JIRA` client. Every outcome,
    including transport errors with no response, comes back as a Success or
    Failure value; nothing is raised to the caller. No retries, no caching.
    """

    def __init__(self, jira_client, operations=None, max_workers=4):
        self.jira_client = jira_client
        self.operations = OPERATIONS if operations is None else operations
        self.server_url = jira_client._options['server'].rstrip('/')
        self.max_workers = max_workers
        self._executor = None

    def resolve_path(self, operation_name):
        if not isinstance(operation_name, str) or not operation_name:
            return None
        if operation_name.startswith('/'):
            return operation_name
        operation = self.operations.get(operation_name)
        if operation is None:
            return None
        return operation['path']

    def dispatch(self, operation_name, params):
        path = self.resolve_path(operation_name)
        if path is None:
            logger.warning(f"Refusing to dispatch unknown remote operation '{operation_name}'")
            return Failure({'errorMessages': [f"Unknown remote operation '{operation_name}'"]}, {}, 0)

        url = f"{self.server_url}{path}"
        meta = {'url': url, 'method': 'GET'}
        logger.debug(f"Dispatching '{operation_name}' to {url} with {params}")

        try:
            response = self.jira_client._session.get(url, params=dict(params))
            response.raise_for_status()
        except JIRAError as e:
            return Failure(_error_body(e.response, e.text), _response_meta(meta, e.response), e.status_code or 0)
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            return Failure(_error_body(e.response, str(e)), _response_meta(meta, e.response), status_code)
        except requests.exceptions.RequestException as e:
            # No response at all: connection refused, DNS, timeout.
            return Failure({'errorMessages': [str(e)]}, meta, 0)

        try:
            payload = response.json()
        except ValueError:
            logger.debug(f"Non-JSON body from {url}")
            payload = None
        return Success(payload, _response_meta(meta, response), response.status_code)

    def submit(self, operation_name, params):
        """Dispatch on a worker thread. The returned future resolves to an Outcome."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_workers)
        return self._executor.submit(self.dispatch, operation_name, params)

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
