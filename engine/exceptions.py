# engine/exceptions.py

class CollectionError(Exception):
    pass


class DeadlineExceeded(CollectionError):
    pass


class CycleCancelled(CollectionError):
    pass


class SendAfterCancellation(CollectionError):
    """A worker tried to emit a sample after its cycle had already resolved."""


class ChannelClosed(CollectionError):
    pass
