from tinyserve.http.model import (
	Forbidden,
	HTTPRequestError,
	HTTPResponse,
	MalformedRequest,
	MethodNotAllowed,
	NotFound,
)


def test_response_head():
	res = HTTPResponse.Create(b"body { }", contentType="text/css")
	assert res.head() == (
		b"HTTP/1.1 200 OK\r\n"
		b"Content-Type: text/css\r\n"
		b"Content-Length: 8\r\n"
		b"Connection: close\r\n"
		b"\r\n"
	)
	assert res.payload() == res.head() + b"body { }"


def test_content_length_counts_bytes():
	res = HTTPResponse.Create("héllo", contentType="text/html")
	assert res.getHeader("Content-Length") == str(len("héllo".encode("utf8")))


def test_error_page():
	res = HTTPResponse.Error(404)
	assert res.status == 404
	assert res.message == "Not Found"
	assert res.getHeader("Content-Type") == "text/html"
	assert res.body == b"<html><body><h1>Error 404: Not Found</h1></body></html>"
	assert res.head().startswith(b"HTTP/1.1 404 Not Found\r\n")


def test_error_statuses():
	assert MethodNotAllowed("POST").status == 405
	assert Forbidden("x").status == 403
	assert NotFound("x").status == 404
	assert MalformedRequest("x").status is None
	assert HTTPRequestError("x", 400).status == 400
	assert isinstance(NotFound("x"), HTTPRequestError)


# EOF
