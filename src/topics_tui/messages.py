from textual.message import Message

class TopicsUpdated(Message):
    """The active topic list or the fetch status changed."""
