from .http.model import (
	HTTPRequestLine,
	HTTPResponse,
	HTTPRequestError,
	MalformedRequest,
	MethodNotAllowed,
	Forbidden,
	NotFound,
)  # NOQA: F401
from .files import FileService  # NOQA: F401
from .server import run, ServerOptions, AIOSocketServer  # NOQA: F401


# EOF
