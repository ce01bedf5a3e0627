from copy import deepcopy

from errors import ConfigError
from errors import DisallowedOptionsError
from errors import InvalidOptionValuesError
from errors import MissingOptionsError
from errors import ReservedOptionOverrideError
from options import OptionSet
from options import SECRET_OPTIONS


def split_names(value):
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [name.strip() for name in value if name and name.strip()]


def parse_default(value: str):
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    return value


class ConfigRules:
    """Accepted option vocabulary of a deployment.

    The template is built once at startup. Each request works on its own
    ``copy()``; ``set_entries`` stores the merged options on that copy.
    """

    def __init__(self):
        self.required = set()
        self.allowed = set()
        self.defaults = {}
        self.options = OptionSet()

    def read_conf(self, required, allowed, defaults):
        self.required = set(split_names(required))
        self.allowed = set(split_names(allowed))
        self.defaults = {}
        for entry in split_names(defaults):
            name, sep, value = entry.partition(":")
            name = name.strip()
            if not sep or not name:
                raise ConfigError(f"Invalid default option '{entry}', expected name:value")
            self.defaults[name] = parse_default(value.strip())

        overlap = self.required & set(self.defaults)
        if overlap:
            raise ConfigError(
                f"Options cannot be both mandatory and defaulted : {', '.join(sorted(overlap))}"
            )
        return self

    def copy(self):
        return deepcopy(self)

    @property
    def vocabulary(self):
        return self.required | self.allowed | set(self.defaults)

    def set_entries(self, options, reserved=()):
        options = OptionSet(options or {})

        overridden = [name for name in reserved if name in options]
        if overridden:
            raise ReservedOptionOverrideError(overridden)

        for name, value in self.defaults.items():
            options.setdefault(name, value)

        missing = self.required - set(options)
        if missing:
            raise MissingOptionsError(missing)

        disallowed = set(options) - self.vocabulary
        if disallowed:
            raise DisallowedOptionsError(disallowed)

        # mount.cifs splits its -o list on commas; only secrets are escaped
        unsplittable = [
            name
            for name, value in options.items()
            if name not in SECRET_OPTIONS and "," in str(value)
        ]
        if unsplittable:
            raise InvalidOptionValuesError(unsplittable)

        self.options = options
        return options

    def __repr__(self):
        return (
            f"ConfigRules(required={sorted(self.required)}, "
            f"allowed={sorted(self.allowed)}, defaults={sorted(self.defaults)})"
        )
