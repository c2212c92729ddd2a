"""Aggregate -> JSON shapes used on the wire (camelCase, as the frontends expect)."""

from math import ceil


def _iso(value):
    return value.isoformat() if value else None


def category_summary(category):
    if category is None:
        return None
    return {"id": str(category.id), "name": category.name, "slug": category.slug}


def category_to_dict(category, product_count=None):
    data = {
        "id": str(category.id),
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "image": category.image,
        "imageSource": category.image_source,
        "imageFromProduct": str(category.image_from_product) if category.image_from_product else None,
        "isActive": category.is_active,
        "createdAt": _iso(category.created_at),
        "updatedAt": _iso(category.updated_at),
    }
    if product_count is not None:
        data["productCount"] = product_count
    return data


def product_to_dict(product, category=None):
    rating = product.rating
    average = rating.average if rating else 0.0
    count = rating.count if rating else 0
    dimensions = product.dimensions
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "stock": product.stock,
        "sku": product.sku,
        "status": product.status,
        "category": category_summary(category) or str(product.category_id),
        "images": [{"url": image.url, "alt": image.alt} for image in product.ordered_images],
        **product.variant_axes(),
        "weight": product.weight,
        "dimensions": (
            {"length": dimensions.length, "width": dimensions.width, "height": dimensions.height}
            if dimensions
            else None
        ),
        "rating": {"average": average, "count": count},
        # Legacy flat shape, derived from the canonical rating above
        "averageRating": average,
        "totalReviews": count,
        "isFeatured": product.is_featured,
        "isActive": product.is_active,
        "createdAt": _iso(product.created_at),
        "updatedAt": _iso(product.updated_at),
    }


def order_to_dict(order):
    address = order.shipping_address
    return {
        "id": str(order.id),
        "orderNumber": order.order_number,
        "user": str(order.user_id),
        "items": [
            {
                "product": str(item.product_id) if item.product_id else None,
                "name": item.name,
                "price": item.price,
                "quantity": item.quantity,
                "selectedColor": item.color,
                "selectedSize": item.size,
                "image": item.image,
            }
            for item in order.items
        ],
        "shippingAddress": (
            {
                "name": address.name,
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "zipCode": address.zip_code,
                "country": address.country,
                "phone": address.phone,
                "isPlaceholder": address.is_placeholder,
            }
            if address
            else None
        ),
        "paymentInfo": {
            "method": order.payment_method,
            "status": order.payment_status,
            "transactionId": order.transaction_id,
        },
        "orderStatus": order.status,
        "subtotal": order.subtotal,
        "shippingCost": order.shipping_cost,
        "tax": order.tax,
        "totalAmount": order.total_amount,
        "trackingNumber": order.tracking_number,
        "deliveredAt": _iso(order.delivered_at),
        "cancelledBy": order.cancelled_by,
        "createdAt": _iso(order.created_at),
        "updatedAt": _iso(order.updated_at),
    }


def review_to_dict(review, product=None):
    data = {
        "id": str(review.id),
        "product": str(review.product_id),
        "user": str(review.user_id) if review.user_id else None,
        "reviewerName": review.reviewer_name,
        "reviewerEmail": review.reviewer_email,
        "rating": review.rating,
        "title": review.title,
        "comment": review.comment,
        "isVerifiedPurchase": review.is_verified_purchase,
        "isApproved": review.is_approved,
        "helpfulVotes": review.helpful_votes,
        "createdAt": _iso(review.created_at),
        "updatedAt": _iso(review.updated_at),
    }
    if product is not None:
        data["product"] = {
            "id": str(product.id),
            "name": product.name,
            "price": product.price,
            "images": [{"url": image.url, "alt": image.alt} for image in product.ordered_images],
        }
    return data


def paginate(items: list, page: int, limit: int) -> tuple[list, dict]:
    total = len(items)
    pages = ceil(total / limit) if limit else 0
    start = (page - 1) * limit
    return items[start : start + limit], {
        "current": page,
        "pages": pages,
        "total": total,
        "hasNext": page < pages,
        "hasPrev": page > 1,
    }
