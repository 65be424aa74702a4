HTTP_STATUS: dict[int, str] = {
	200: "OK",
	403: "Forbidden",
	404: "Not Found",
	405: "Method Not Allowed",
}

# EOF
