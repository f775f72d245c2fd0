"""Error kinds raised by the mock test engine."""


class MockTestError(Exception):
    """Base class for all mock test errors."""


class QuestionLoadFailure(MockTestError):
    """Remote question bank unavailable or returned unusable rows. Recovered by the question source."""


class MalformedLocalData(MockTestError):
    """The built-in fallback question set is invalid. Programming defect, never recovered."""


class AuthenticationRequired(MockTestError):
    """Submission attempted without an authenticated identity."""


class PersistenceFailure(MockTestError):
    """Batch insert of test results failed."""


class SessionError(MockTestError):
    """Operation not valid for the session's current state."""


class QuestionIndexOutOfRange(SessionError, IndexError):
    pass


class OptionOutOfRange(SessionError, ValueError):
    pass
