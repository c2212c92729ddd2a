"""FastAPI endpoints for categories and products."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.dependencies import admin_principal, get_image_storage
from storefront.api.schemas import (
    CreateCategoryRequest,
    CreateProductRequest,
    UpdateCategoryRequest,
    UpdateProductRequest,
)
from storefront.api.serializers import category_to_dict, paginate, product_to_dict
from storefront.catalogue.category.category import Category
from storefront.catalogue.category.management import CreateCategory, DeleteCategory, UpdateCategory, load_category
from storefront.catalogue.product.creation import CreateProduct
from storefront.catalogue.product.details import UpdateProduct
from storefront.catalogue.product.lifecycle import DeleteProduct
from storefront.catalogue.product.product import Product
from storefront.identity.principal import Principal
from storefront.shared.errors import NotFound
from storefront.storage.port import ImageStorage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

category_router = APIRouter(prefix="/categories", tags=["categories"])
product_router = APIRouter(prefix="/products", tags=["products"])

SORT_KEYS = {
    "createdAt": lambda product: product.created_at,
    "price": lambda product: product.price,
    "name": lambda product: product.name.lower(),
    "rating": lambda product: product.rating.average if product.rating else 0.0,
    "stock": lambda product: product.stock,
}


def _dump(value):
    if value is None:
        return None
    if isinstance(value, list):
        return json.dumps([item.model_dump() if hasattr(item, "model_dump") else item for item in value])
    return json.dumps(value.model_dump())


def _categories_by_id(products):
    repo = current_domain.repository_for(Category)
    ids = {str(product.category_id) for product in products}
    return {category_id: repo._dao.query.filter(id=category_id).all().first for category_id in ids}


def _products_payload(products):
    categories = _categories_by_id(products)
    return [product_to_dict(product, categories.get(str(product.category_id))) for product in products]


def sort_products(products, sort: str):
    field = sort.lstrip("-")
    key = SORT_KEYS.get(field, SORT_KEYS["createdAt"])
    return sorted(products, key=key, reverse=sort.startswith("-"))


def filter_products(products, category=None, search=None, min_price=None, max_price=None, status=None, featured=None):
    needle = search.lower() if search else None

    def matches(product):
        if category and str(product.category_id) != category:
            return False
        if needle:
            haystack = [product.name, product.description or "", *product.variant_axes()["tags"]]
            if not any(needle in text.lower() for text in haystack):
                return False
        if min_price is not None and product.price < min_price:
            return False
        if max_price is not None and product.price > max_price:
            return False
        if status and product.status != status:
            return False
        return not (featured and not product.is_featured)

    return [product for product in products if matches(product)]


# --- Category endpoints ---


@category_router.get("")
async def list_categories():
    products = current_domain.repository_for(Product)
    categories = current_domain.repository_for(Category).active()
    return {
        "success": True,
        "data": [category_to_dict(c, products.count_active_in_category(c.id)) for c in categories],
    }


@category_router.get("/{id_or_slug}")
async def get_category(id_or_slug: str):
    repo = current_domain.repository_for(Category)
    category = repo._dao.query.filter(id=id_or_slug).all().first or repo.find_by_slug(id_or_slug)
    if category is None or not category.is_active:
        raise NotFound("Category not found")

    count = current_domain.repository_for(Product).count_active_in_category(category.id)
    return {"success": True, "data": category_to_dict(category, count)}


@category_router.post("", status_code=201)
async def create_category(body: CreateCategoryRequest, _: Principal = Depends(admin_principal)):
    category_id = current_domain.process(
        CreateCategory(name=body.name, description=body.description, image=body.image),
        asynchronous=False,
    )
    return {
        "success": True,
        "message": "Category created successfully",
        "data": category_to_dict(load_category(category_id)),
    }


@category_router.put("/{category_id}")
async def update_category(category_id: str, body: UpdateCategoryRequest, _: Principal = Depends(admin_principal)):
    current_domain.process(
        UpdateCategory(
            category_id=category_id,
            name=body.name,
            description=body.description,
            image=body.image,
            clear_image=body.clear_image,
            is_active=body.is_active,
        ),
        asynchronous=False,
    )
    return {
        "success": True,
        "message": "Category updated successfully",
        "data": category_to_dict(load_category(category_id)),
    }


@category_router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    _: Principal = Depends(admin_principal),
    storage: ImageStorage = Depends(get_image_storage),
):
    category = load_category(category_id)
    manual_image = category.image if not category.is_auto_image else None

    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)

    if manual_image and not storage.discard(manual_image):
        logger.info("category_image_not_discarded", category_id=category_id, image=manual_image)
    return {"success": True, "message": "Category deleted successfully"}


# --- Product endpoints ---


@product_router.get("")
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    category: str | None = None,
    search: str | None = None,
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    status: str | None = None,
    sort: str = "-createdAt",
    featured: bool | None = None,
):
    products = current_domain.repository_for(Product).all_active()
    products = filter_products(products, category, search, min_price, max_price, status, featured)
    page_items, pagination = paginate(sort_products(products, sort), page, limit)
    return {"success": True, "data": _products_payload(page_items), "pagination": pagination}


@product_router.get("/category/{slug}")
async def list_products_by_category(
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    sort: str = "-createdAt",
):
    category = current_domain.repository_for(Category).find_by_slug(slug)
    if category is None:
        raise NotFound("Category not found")

    products = current_domain.repository_for(Product).active_in_category(category.id)
    page_items, pagination = paginate(sort_products(products, sort), page, limit)
    return {
        "success": True,
        "category": {"name": category.name, "slug": category.slug, "description": category.description},
        "data": [product_to_dict(product, category) for product in page_items],
        "pagination": pagination,
    }


@product_router.get("/{product_id}")
async def get_product(product_id: str):
    product = current_domain.repository_for(Product).find_active(product_id)
    if product is None:
        raise NotFound("Product not found")
    return {"success": True, "data": _products_payload([product])[0]}


@product_router.post("", status_code=201)
async def create_product(body: CreateProductRequest, admin: Principal = Depends(admin_principal)):
    product_id = current_domain.process(
        CreateProduct(
            name=body.name,
            description=body.description,
            price=body.price,
            stock=body.stock,
            category_id=body.category,
            sku=body.sku,
            status=body.status,
            colors=_dump(body.colors),
            sizes=_dump(body.sizes),
            materials=_dump(body.materials),
            tags=_dump(body.tags),
            images=_dump(body.images),
            weight=body.weight,
            dimensions=_dump(body.dimensions),
            is_featured=body.is_featured,
            created_by=admin.id,
        ),
        asynchronous=False,
    )
    product = current_domain.repository_for(Product).get(product_id)
    return {
        "success": True,
        "message": "Product created successfully",
        "data": _products_payload([product])[0],
    }


@product_router.put("/{product_id}")
async def update_product(product_id: str, body: UpdateProductRequest, _: Principal = Depends(admin_principal)):
    current_domain.process(
        UpdateProduct(
            product_id=product_id,
            name=body.name,
            description=body.description,
            price=body.price,
            stock=body.stock,
            category_id=body.category,
            status=body.status,
            colors=_dump(body.colors),
            sizes=_dump(body.sizes),
            materials=_dump(body.materials),
            tags=_dump(body.tags),
            images=_dump(body.images),
            weight=body.weight,
            dimensions=_dump(body.dimensions),
            is_featured=body.is_featured,
        ),
        asynchronous=False,
    )
    product = current_domain.repository_for(Product).get(product_id)
    return {
        "success": True,
        "message": "Product updated successfully",
        "data": _products_payload([product])[0],
    }


@product_router.delete("/{product_id}")
async def delete_product(product_id: str, _: Principal = Depends(admin_principal)):
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return {"success": True, "message": "Product deleted successfully"}
