"""Exception types raised by skillkit loaders and engines."""


class SkillkitError(ValueError):
    """Base class for all skillkit errors."""


class FrontMatterError(SkillkitError):
    """A markdown document has missing or malformed front matter."""


class RuleSetError(SkillkitError):
    """A validator rule file could not be loaded."""


class GeneratorError(SkillkitError):
    """A generator definition is invalid or was invoked with bad arguments."""
