from __future__ import annotations


class IbibioSearchError(Exception):
    """Base class for errors raised by ibibio_search."""


class InvalidEntryError(IbibioSearchError, ValueError):
    def __init__(self, reason: str, *, record_index: int | None = None) -> None:
        self.reason = reason
        self.record_index = record_index
        where = f" (record {record_index})" if record_index is not None else ""
        super().__init__(f"invalid dictionary entry{where}: {reason}")


class EngineNotReadyError(IbibioSearchError, RuntimeError):
    pass


class SourceUnavailableError(IbibioSearchError, RuntimeError):
    pass
