"""
Catalog of detectable ECMAScript features.

Every `EsFeature` member is declared together with the edition that introduced
it, so the catalog cannot contain a feature without an edition. Members compare
by identity: two features introduced by the same edition stay distinct inside
a set, and edition comparison goes through `edition_of` instead.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from .versions import EsVersion


class EsFeature(Enum):
    EXPONENTIATION_OPERATOR = ("Exponentiation operator", EsVersion.ES7)

    OBJECT_VALUES_ENTRIES = ("Object.values / Object.entries", EsVersion.ES8)
    OBJECT_GET_OWN_PROPERTY_DESCRIPTORS = (
        "Object.getOwnPropertyDescriptors",
        EsVersion.ES8,
    )
    ASYNC_FUNCTIONS = ("Async functions", EsVersion.ES8)
    SHARED_MEMORY_AND_ATOMICS = ("Shared memory and atomics", EsVersion.ES8)

    REGEXP_DOT_ALL_FLAG = ("RegExp s (dotAll) flag", EsVersion.ES9)
    REST_SPREAD_PROPERTIES = ("Rest/spread properties", EsVersion.ES9)
    REGEXP_LOOKBEHIND_ASSERTIONS = ("RegExp lookbehind assertions", EsVersion.ES9)
    REGEXP_UNICODE_PROPERTY_ESCAPES = (
        "RegExp Unicode property escapes",
        EsVersion.ES9,
    )
    REGEXP_NAMED_CAPTURE_GROUPS = ("RegExp named capture groups", EsVersion.ES9)
    ASYNC_ITERATION = ("Asynchronous iteration", EsVersion.ES9)

    OPTIONAL_CATCH_BINDING = ("Optional catch binding", EsVersion.ES10)
    OBJECT_FROM_ENTRIES = ("Object.fromEntries", EsVersion.ES10)

    BIGINT = ("BigInt", EsVersion.ES11)
    PROMISE_ALL_SETTLED = ("Promise.allSettled", EsVersion.ES11)
    GLOBAL_THIS = ("globalThis", EsVersion.ES11)
    FOR_IN_MECHANICS = ("for-in mechanics", EsVersion.ES11)
    OPTIONAL_CHAINING = ("Optional chaining", EsVersion.ES11)
    NULLISH_COALESCING_OPERATOR = ("Nullish coalescing operator", EsVersion.ES11)
    DYNAMIC_IMPORT = ("Dynamic import()", EsVersion.ES11)
    IMPORT_META = ("import.meta", EsVersion.ES11)

    PROMISE_ANY = ("Promise.any", EsVersion.ES12)
    LOGICAL_ASSIGNMENT_OPERATORS = ("Logical assignment operators", EsVersion.ES12)
    NUMERIC_SEPARATORS = ("Numeric separators", EsVersion.ES12)
    WEAK_REFERENCES = ("WeakRef / FinalizationRegistry", EsVersion.ES12)

    CLASS_FIELDS = ("Class fields", EsVersion.ES13)
    REGEXP_MATCH_INDICES = ("RegExp match indices (d flag)", EsVersion.ES13)
    TOP_LEVEL_AWAIT = ("Top-level await", EsVersion.ES13)
    PRIVATE_FIELD_BRAND_CHECKS = (
        "Ergonomic brand checks for private fields",
        EsVersion.ES13,
    )
    OBJECT_HAS_OWN = ("Object.hasOwn", EsVersion.ES13)
    CLASS_STATIC_BLOCK = ("Class static block", EsVersion.ES13)
    ERROR_CAUSE = ("Error cause", EsVersion.ES13)

    HASHBANG_GRAMMAR = ("Hashbang grammar", EsVersion.ES14)

    ATOMICS_WAIT_ASYNC = ("Atomics.waitAsync", EsVersion.ES15)
    REGEXP_V_FLAG = (
        "RegExp v flag with set notation and properties of strings",
        EsVersion.ES15,
    )
    ARRAY_GROUPING = ("Array grouping", EsVersion.ES15)
    PROMISE_WITH_RESOLVERS = ("Promise.withResolvers", EsVersion.ES15)
    RESIZABLE_ARRAY_BUFFERS = (
        "Resizable and growable ArrayBuffers",
        EsVersion.ES15,
    )

    DUPLICATE_NAMED_CAPTURE_GROUPS = (
        "RegExp duplicate named capture groups",
        EsVersion.ES16,
    )
    REGEXP_MODIFIERS = ("RegExp pattern modifiers", EsVersion.ES16)
    PROMISE_TRY = ("Promise.try", EsVersion.ES16)
    REGEXP_ESCAPE = ("RegExp.escape", EsVersion.ES16)
    FLOAT16_ARRAY = ("Float16Array", EsVersion.ES16)

    def __init__(self, title: str, edition: EsVersion) -> None:
        self.title = title
        self.edition = edition

    def __str__(self) -> str:
        return self.title


def edition_of(feature: EsFeature) -> EsVersion:
    return feature.edition


def latest_feature(features: Iterable[EsFeature]) -> EsFeature:
    """
    Return the feature introduced by the most recent edition.

    Ties between features of the same edition go to the one declared first in
    the catalog, so the result does not depend on iteration order.
    """
    order = {feature: index for index, feature in enumerate(EsFeature)}
    return max(features, key=lambda feature: (feature.edition, -order[feature]))


__all__ = ["EsFeature", "edition_of", "latest_feature"]
