"""Top level Dude exceptions"""


class DudeError(Exception):
    """Base for all Dude errors"""


class UsageError(DudeError):
    """An error in the way the library is being used"""

    def __init__(self, msg, suggested_fix=""):
        super().__init__(msg)
        self.msg = msg
        self.suggested_fix = suggested_fix

    def __str__(self):
        text = self.msg
        if type(self) != UsageError:
            text = f"{self.__doc__}: {text}"
        if self.suggested_fix:
            text = f"{text}\n\n{self.suggested_fix}"
        return text


class UnexpectedError(DudeError):
    """An error which is unexpected and with no obvious solution"""

    def __init__(self, msg):
        super().__init__(msg)
        self.msg = msg

    def __str__(self):
        if type(self) == UnexpectedError:
            return self.msg
        else:
            return f"{self.__doc__}:\n{self.msg}"


class FutureAlreadyResolved(UsageError):
    """Future already done"""


class FutureNotResolved(UsageError):
    """Future not done yet"""


class TaskAlreadyRan(UsageError):
    """Task already asked to run"""


class TaskAlreadyCanceled(UsageError):
    """Task already canceled"""


class TaskCanceled(DudeError):
    """Task canceled while waiting for its dependencies"""

    def __init__(self, msg):
        super().__init__(msg)
        self.msg = msg


class ConfigError(UsageError):
    """Error loading configuration"""
