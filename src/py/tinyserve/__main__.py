from .server import run
from .config import WEBROOT


def main() -> None:
	run(WEBROOT)


if __name__ == "__main__":
	main()

# EOF
