"""Module and class docstrings stay attached where tooling can read them."""

import importlib

import pytest

from cake_assistant.attribute_extractor import AttributeExtractor
from cake_assistant.cake_design import DesignSpecifications
from cake_assistant.catalog_store import CatalogData
from cake_assistant.dispatcher import HandlerReply
from cake_assistant.models import MessagePayload
from cake_assistant.pricing import PricingResult, PricingTables
from cake_assistant.query_analysis import PaymentQuery, ShippingQuery


@pytest.mark.parametrize(
    "module_name",
    [
        "cake_assistant.classification",
        "cake_assistant.keyword_tables",
        "cake_assistant.classifier",
        "cake_assistant.pricing",
        "cake_assistant.dispatcher",
        "cake_assistant.catalog_store",
        "cake_assistant.context_builder",
    ],
)
def test_module_docstring_precedes_imports(module_name):
    """A string placed after `from __future__` is a plain expression, leaving __doc__ empty."""
    assert importlib.import_module(module_name).__doc__


@pytest.mark.parametrize(
    "cls",
    [
        AttributeExtractor,
        PricingTables,
        PricingResult,
        HandlerReply,
        DesignSpecifications,
        CatalogData,
        ShippingQuery,
        PaymentQuery,
        MessagePayload,
    ],
)
def test_data_and_service_classes_are_documented(cls):
    # dataclass() synthesizes a signature docstring when none is written
    assert cls.__doc__
    assert not cls.__doc__.startswith(cls.__name__ + "(")
