MASK = "*****"


def mask_secrets(text, secrets=()):
    for secret in secrets:
        if secret:
            text = text.replace(str(secret), MASK)
    return text


class ConfigError(Exception):
    pass


class SafeError(Exception):
    """Error whose message can be logged or returned to a client.

    Every value passed in ``secrets`` is masked before the message is
    stored, so credentials that were part of a failed command never show
    up in the rendered error.
    """

    def __init__(self, message, secrets=()):
        self.message = mask_secrets(str(message), secrets)
        super().__init__(self.message)


class OptionsError(SafeError):
    prefix = "Invalid options"

    def __init__(self, names):
        self.names = sorted(names)
        super().__init__(f"{self.prefix} : {', '.join(self.names)}")


class MissingOptionsError(OptionsError):
    prefix = "Missing mandatory options"


class DisallowedOptionsError(OptionsError):
    prefix = "Not allowed options"


class ReservedOptionOverrideError(OptionsError):
    prefix = "Reserved options cannot be overridden"


class InvalidOptionValuesError(OptionsError):
    prefix = "Option values cannot contain ','"


class CommandError(Exception):
    def __init__(self, command, returncode, output=b""):
        self.command = command
        self.returncode = returncode
        self.output = output or b""
        super().__init__(str(self))

    def __str__(self):
        details = self.output.decode(errors="replace").strip()
        message = f"{self.command} failed with exit code {self.returncode}"
        if details:
            message += f": {details}"
        return message


class CommandTimeoutError(CommandError):
    def __init__(self, command, timeout):
        self.timeout = timeout
        super().__init__(command, None)

    def __str__(self):
        return f"{self.command} did not finish within {self.timeout}s"
