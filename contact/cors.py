"""
CORS handling for the contact form endpoint.

The allowed origin is echoed back only when it is on the allow-list;
any other requester gets the default site origin.
"""


def get_request_origin(request):
    """Return the Origin header of a request, or an empty string."""
    return request.headers.get('Origin', '') or ''


def cors_headers(origin, allowed_origins, default_origin):
    """
    Build the CORS permission headers for a requesting origin.

    Args:
        origin: Origin header sent by the client (may be empty)
        allowed_origins: Iterable of permitted origins
        default_origin: Origin echoed when the requester is not permitted

    Returns:
        dict: Header name to value
    """
    allow_origin = origin if origin in set(allowed_origins) else default_origin

    return {
        'Access-Control-Allow-Origin': allow_origin,
        'Access-Control-Allow-Methods': 'POST, OPTIONS',
        'Access-Control-Allow-Headers': 'Content-Type',
        'Access-Control-Max-Age': '86400',
        'Vary': 'Origin',
    }
