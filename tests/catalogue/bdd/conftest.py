"""Shared BDD fixtures and step definitions for the catalogue."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from storefront.catalogue.category.category import Category


@pytest.fixture()
def products():
    """Products created during a scenario, keyed by their label."""
    return {}


@pytest.fixture()
def current_category():
    return {}


@given(parsers.cfparse('a category named "{name}"'), target_fixture="current_category")
def category_named(make_category, name):
    return {"id": str(make_category(name).id)}


@given(parsers.cfparse('a category "{name}" with an admin-chosen image "{image}"'), target_fixture="current_category")
def category_named_with_image(make_category, name, image):
    return {"id": str(make_category(name, image=image).id)}


def _reload(current_category):
    return current_domain.repository_for(Category).get(current_category["id"])


@then("the category has no image")
def category_has_no_image(current_category):
    assert _reload(current_category).image is None


@then(parsers.cfparse('the category image is "{image}"'))
def category_image_is(current_category, image):
    assert _reload(current_category).image == image


@then(parsers.cfparse('the category image source is "{source}"'))
def category_image_source_is(current_category, source):
    assert _reload(current_category).image_source == source


@then(parsers.cfparse('the category image comes from product "{label}"'))
def category_image_from(current_category, products, label):
    assert str(_reload(current_category).image_from_product) == products[label]
