from __future__ import annotations


class MoveError(ValueError):
    """A disallowed move. The state passed in is left exactly as it was."""


class InvalidIndex(MoveError):
    pass


class SequenceError(MoveError):
    pass


class InsufficientCards(MoveError):
    pass


class InvalidTarget(MoveError):
    pass


class PositionTaken(MoveError):
    pass
