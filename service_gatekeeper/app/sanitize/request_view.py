"""
Read-only request accessors that sanitize values on every read.
"""

from typing import Dict, List, Optional

from starlette.datastructures import FormData, Headers, ImmutableMultiDict
from starlette.requests import HTTPConnection

from .policy import Sanitizer


class RequestView:
    """Sanitizing view over a request's parameters and headers.

    Parameters are the query string, followed by any form text fields
    attached with :meth:`with_form`. Names are returned as sent; only values
    pass through the sanitizer, and only when read.
    """

    def __init__(self, params: ImmutableMultiDict, headers: Headers, sanitizer: Sanitizer):
        self._params = params
        self._headers = headers
        self._sanitizer = sanitizer

    def get_parameter(self, name: str) -> Optional[str]:
        """First value of ``name``, or None when absent."""
        # MultiDict.get returns the last value; callers expect the first
        values = self._params.getlist(name)
        return self._sanitizer.sanitize(values[0] if values else None)

    def get_parameter_values(self, name: str) -> Optional[List[str]]:
        """All values of ``name``, each sanitized; None when absent."""
        values = self._params.getlist(name)
        if not values:
            return None
        return [self._sanitizer.sanitize(value) for value in values]

    def get_parameter_names(self) -> List[str]:
        return list(dict.fromkeys(self._params.keys()))

    def get_parameter_map(self) -> Dict[str, List[str]]:
        return {name: self.get_parameter_values(name) for name in self.get_parameter_names()}

    def get_header(self, name: str) -> Optional[str]:
        return self._sanitizer.sanitize(self._headers.get(name))

    def get_headers(self, name: str) -> List[str]:
        return [self._sanitizer.sanitize(value) for value in self._headers.getlist(name)]

    def get_header_names(self) -> List[str]:
        return list(dict.fromkeys(self._headers.keys()))

    def with_form(self, form: FormData) -> "RequestView":
        """Return a view that also exposes the text fields of ``form``."""
        items = list(self._params.multi_items())
        # Uploaded files are not request parameters
        items.extend((key, value) for key, value in form.multi_items() if isinstance(value, str))
        return RequestView(ImmutableMultiDict(items), self._headers, self._sanitizer)


def sanitize_request_view(request: HTTPConnection, sanitizer: Sanitizer, form: Optional[FormData] = None) -> RequestView:
    """Wrap ``request`` in a RequestView backed by ``sanitizer``."""
    view = RequestView(request.query_params, request.headers, sanitizer)
    if form is not None:
        view = view.with_form(form)
    return view
