import sys
from enum import Enum
from typing import NamedTuple, Any, Callable, TypeAlias
from contextvars import ContextVar
from .term import Term
from ..config import LOG_LEVEL

ERR = sys.stderr

TPrimitive: TypeAlias = bool | int | float | str | bytes | None

LogOrigin: ContextVar[str] = ContextVar("LogOrigin", default="tinyserve")


class LogType(Enum):
	Message = 0
	Event = 20


class LogLevel(Enum):
	Debug = 0
	Info = 10
	Warning = 30
	Exception = 50


LOG_LEVEL_COLOR = {
	LogLevel.Debug: 31,
	LogLevel.Info: 75,
	LogLevel.Warning: 202,
	LogLevel.Exception: 124,
}

LOG_LEVELS: dict[str, LogLevel] = {
	"debug": LogLevel.Debug,
	"info": LogLevel.Info,
	"warning": LogLevel.Warning,
}

# Entries below this level are not written
THRESHOLD: LogLevel = LOG_LEVELS.get(LOG_LEVEL, LogLevel.Info)


class LogEntry(NamedTuple):
	origin: str
	type: LogType = LogType.Message
	level: LogLevel = LogLevel.Info
	message: str | None = None
	name: str | None = None
	value: Any = None
	context: dict[str, TPrimitive] | None = None
	icon: str | None = None


def formatData(value: Any) -> str:
	if value is None or value == () or value == [] or value == {}:
		return "◌"
	elif isinstance(value, dict):
		return " ".join(
			f"{Term.BOLD}{k}{Term.RESET}={formatData(v)}" for k, v in value.items()
		)
	elif isinstance(value, list) or isinstance(value, tuple):
		return ",".join(formatData(v) for v in value)
	elif isinstance(value, str):
		return repr(value) if " " in value else value
	elif isinstance(value, bool):
		return "✓" if value else "✗"
	elif isinstance(value, float):
		return f"{value:0.2f}"
	else:
		return str(value)


def send(entry: LogEntry) -> LogEntry:
	if entry.level.value < THRESHOLD.value:
		return entry
	icon: str = f" {entry.icon}" if entry.icon else ""
	clr: str = Term.Color(LOG_LEVEL_COLOR[entry.level])
	if entry.type == LogType.Event:
		ERR.write(
			f"{clr}{Term.BOLD}[{entry.origin}] {entry.name}{Term.RESET} {formatData(entry.value)} {formatData(entry.context)}{Term.RESET}\n"
		)
	else:
		ERR.write(
			f"{clr}{Term.BOLD}[{entry.origin}]{Term.RESET}{icon} {entry.message} {formatData(entry.context)}{Term.RESET}\n"
		)
	ERR.flush()
	return entry


def entry(
	*,
	origin: str | None = None,
	type: LogType = LogType.Message,
	level: LogLevel = LogLevel.Info,
	message: str | None = None,
	name: str | None = None,
	value: Any = None,
	context: dict[str, TPrimitive],
	icon: str | None = None,
) -> LogEntry:
	return LogEntry(
		origin=origin or LogOrigin.get(),
		type=type,
		level=level,
		message=message,
		name=name,
		value=value,
		context=context,
		icon=icon,
	)


def debug(
	message: str,
	*,
	origin: str | None = None,
	icon: str | None = None,
	**context: TPrimitive,
) -> LogEntry:
	return send(
		entry(
			message=message,
			level=LogLevel.Debug,
			origin=origin,
			context=context,
			icon=icon,
		)
	)


def info(
	message: str,
	*,
	origin: str | None = None,
	icon: str | None = None,
	**context: TPrimitive,
) -> LogEntry:
	return send(entry(message=message, origin=origin, context=context, icon=icon))


def warning(
	message: str,
	*,
	origin: str | None = None,
	icon: str | None = None,
	**context: TPrimitive,
) -> LogEntry:
	return send(
		entry(
			message=message,
			level=LogLevel.Warning,
			origin=origin,
			context=context,
			icon=icon,
		)
	)


def event(
	event: str,
	value: Any = None,
	*,
	origin: str | None = None,
	**context: TPrimitive,
) -> LogEntry:
	return send(
		entry(
			name=event,
			value=value,
			type=LogType.Event,
			origin=origin,
			context=context,
		)
	)


def exception(
	exception: BaseException,
	message: str | None = None,
) -> BaseException:
	try:
		stream = ERR
		stream.write(
			f"!!! EXCP {f'{message}: [{exception.__class__.__name__}] {exception}' if message else f'[{exception.__class__.__name__}] {exception}'}\n"
		)
		tb = exception.__traceback__
		while tb:
			code = tb.tb_frame.f_code
			stream.write(
				f"... in {code.co_name:15s} at {tb.tb_lineno:4d} in {code.co_filename}\n",
			)
			tb = tb.tb_next
		stream.flush()
	except Exception:  # nosec: B110
		# This is called from exception handlers, so it must never raise.
		pass

	# Allows `raise exception(e)`
	return exception


LOGGED_LEVELS: dict[Callable[..., Any], LogLevel] = {
	debug: LogLevel.Debug,
	info: LogLevel.Info,
	event: LogLevel.Info,
	warning: LogLevel.Warning,
}


def logged(item: Callable[..., Any]) -> bool:
	"""Takes one of the logging function, and tells if it is currently
	enabled. This is used to guard against building the whole entry
	when not necessary."""
	return LOGGED_LEVELS.get(item, LogLevel.Exception).value >= THRESHOLD.value


# EOF
