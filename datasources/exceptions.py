# datasources/exceptions.py

class DataSourceError(Exception):
    """A fetch against the instance inventory or the log service failed."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class DataSourceUnavailable(DataSourceError):
    pass


class QueryTimeout(DataSourceError):
    pass


class InvalidQuery(DataSourceError):
    pass
