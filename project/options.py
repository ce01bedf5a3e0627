from errors import MASK

READONLY_ALIASES = ("readonly", "ro")
SECRET_OPTIONS = ("password",)
TRUE_STRINGS = {"true", "1", "yes", "on"}


def escape_commas(value):
    # mount.cifs reads a doubled comma inside a value as a literal comma
    return str(value).replace(",", ",,")


def is_truthy(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return False


class OptionSet(dict):
    """Options of a single mount request.

    ``readonly`` and ``ro`` are resolved into the ``read_only`` flag;
    ``rendered_items`` skips both keys so renderers only ever look at the
    canonical flag.
    """

    @property
    def read_only(self):
        return any(is_truthy(self[alias]) for alias in READONLY_ALIASES if alias in self)

    def rendered_items(self):
        for key in sorted(self):
            if key not in READONLY_ALIASES:
                yield key, self[key]

    def secrets(self):
        secrets = []
        for key in SECRET_OPTIONS:
            if self.get(key):
                escaped = escape_commas(self[key])
                if escaped != str(self[key]):
                    secrets.append(escaped)
                secrets.append(str(self[key]))
        return secrets

    def masked(self):
        return {
            key: (MASK if key in SECRET_OPTIONS else value)
            for key, value in self.items()
        }

    def copy(self):
        return OptionSet(self)
