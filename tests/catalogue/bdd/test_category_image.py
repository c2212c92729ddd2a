"""BDD tests for category image derivation."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, when
from storefront.catalogue.product.lifecycle import DeleteProduct

scenarios("features/category_image.feature")


@when(parsers.cfparse('a product "{label}" is created in the category with image "{image}"'))
def create_product_with_image(make_product, current_category, products, label, image):
    product = make_product(current_category["id"], name=f"Product {label}", images=[image])
    products[label] = str(product.id)


@when(parsers.cfparse('product "{label}" is deleted'))
def delete_product(products, label):
    current_domain.process(DeleteProduct(product_id=products[label]), asynchronous=False)
