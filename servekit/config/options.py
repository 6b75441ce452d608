"""Shared machinery for option-driven middleware configuration.

Every middleware configuration in this package is a frozen pydantic model
with a factory for its defaults and a family of option constructors. An
option is a plain callable that takes a configuration and returns a copy of
it with exactly one field replaced:

    >>> config = default_rate_limit_config().apply(
    ...     with_rate_limit_rate(10),
    ...     with_rate_limit_rate(20),
    ... )
    >>> config.rate
    20

Options compose in call order, so a later option for the same field wins.
Replacement is wholesale: a new list or dict replaces the old one instead of
being merged with it, and ``None`` and empty collections are stored exactly
as given. No option validates its value.
"""

from collections.abc import Callable, Iterable
from typing import Self

from pydantic import BaseModel, ConfigDict

type Option[M] = Callable[[M], M]


def apply_options[M: BaseModel](config: M, options: Iterable[Option[M]]) -> M:
    """Apply options to a configuration in order.

    Args:
        config: The starting configuration.
        options: Options to apply, first to last.

    Returns:
        M: The configuration after every option has been applied.
    """
    for option in options:
        config = option(config)
    return config


def replace_field[M: BaseModel](name: str, value: object) -> Option[M]:
    """Build an option that replaces a single field.

    The value is stored as-is, without validation or copying.

    Args:
        name: Name of the field to replace.
        value: New value for the field.

    Returns:
        Option[M]: Callable returning a copy of its input with the field replaced.
    """

    def option(config: M) -> M:
        return config.model_copy(update={name: value})

    return option


class OptionsModel(BaseModel):
    """Base class for immutable middleware configurations."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def apply(self, *options: Option[Self]) -> Self:
        """Return a copy of this configuration with the options applied.

        Args:
            *options: Options to apply, first to last.

        Returns:
            Self: The resulting configuration; this instance is left untouched.
        """
        return apply_options(self, options)
