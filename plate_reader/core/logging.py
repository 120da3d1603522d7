from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class _ExtraFormatter(logging.Formatter):
    """Append the ``extra={...}`` context of a record as ``key=value`` pairs."""

    _RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {k: v for k, v in vars(record).items() if k not in self._RESERVED}
        if not context:
            return line
        pairs = " ".join(f"{k}={v!r}" for k, v in sorted(context.items()))
        return f"{line} {pairs}"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Idempotent: the CLI and the stub app factory may both call this.
    if any(getattr(h, "_plate_reader", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(_ExtraFormatter(_FORMAT))
    handler._plate_reader = True  # type: ignore[attr-defined]
    root.addHandler(handler)
