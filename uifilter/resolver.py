#!/usr/bin/env python3
"""
Field resolution.

The compiler never looks at a schema itself. It asks a FieldResolver what
kind of value a field holds and picks the legal match modes from the answer.
"""

import datetime
import decimal
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Mapping, Optional

from .exceptions import FieldResolutionError


class FieldValueCategory(Enum):
    """Kind of value a field holds."""
    TEXT = "text"
    ORDERED = "ordered"
    OPAQUE = "opaque"


_ORDERED_TYPES = (
    int, float, decimal.Decimal,
    datetime.date, datetime.datetime, datetime.time, datetime.timedelta,
)


def category_for_type(python_type: type) -> FieldValueCategory:
    """
    Map a Python type to its value category.

    Strings are text, the totally ordered builtins are ordered, and
    everything else (bool, enums, UUIDs, embedded objects) only supports
    equality.
    """
    if issubclass(python_type, str):
        return FieldValueCategory.TEXT
    if issubclass(python_type, (bool, Enum)):
        return FieldValueCategory.OPAQUE
    if issubclass(python_type, _ORDERED_TYPES):
        return FieldValueCategory.ORDERED
    return FieldValueCategory.OPAQUE


class FieldResolver(ABC):
    """
    Answers "what kind of value does this field hold".
    """

    @abstractmethod
    def resolve(self, field_name: str) -> Optional[FieldValueCategory]:
        """
        Resolve a field name.

        Args:
            field_name: Field referenced by a filter or sort

        Returns:
            The field's value category, or None if the field is unknown
        """
        pass

    def require(self, field_name: str) -> FieldValueCategory:
        """Resolve a field name, raising FieldResolutionError if it is unknown."""
        category = self.resolve(field_name)
        if category is None:
            raise FieldResolutionError(field_name)
        return category


class MappingFieldResolver(FieldResolver):
    """Resolves fields from a fixed name -> category mapping."""

    def __init__(self, categories: Mapping[str, FieldValueCategory]):
        self.categories: Dict[str, FieldValueCategory] = dict(categories)

    @classmethod
    def from_types(cls, types: Mapping[str, type]) -> 'MappingFieldResolver':
        """
        Build a resolver from a name -> Python type mapping.

        Example:
            resolver = MappingFieldResolver.from_types({'name': str, 'age': int})
        """
        return cls({name: category_for_type(python_type) for name, python_type in types.items()})

    def resolve(self, field_name: str) -> Optional[FieldValueCategory]:
        return self.categories.get(field_name)

    def __contains__(self, field_name: str) -> bool:
        return field_name in self.categories


class CompositeFieldResolver(FieldResolver):
    """
    Resolves fields across several roots (for example joined entities).
    The first resolver that knows the field wins.
    """

    def __init__(self, *resolvers: FieldResolver):
        self.resolvers = list(resolvers)

    def resolve(self, field_name: str) -> Optional[FieldValueCategory]:
        for resolver in self.resolvers:
            category = resolver.resolve(field_name)
            if category is not None:
                return category
        return None
