"""FastAPI endpoints for product reviews and their moderation."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.dependencies import admin_principal, current_principal, optional_principal
from storefront.api.schemas import ApproveReviewRequest, CreateReviewRequest, UpdateReviewRequest
from storefront.api.serializers import paginate, review_to_dict
from storefront.catalogue.product.product import Product
from storefront.identity.principal import Principal
from storefront.reviews.editing import EditReview, load_review
from storefront.reviews.moderation import ModerateReview
from storefront.reviews.rating import statistics_for
from storefront.reviews.removal import RemoveReview
from storefront.reviews.review import Review
from storefront.reviews.submission import SubmitReview
from storefront.reviews.voting import MarkReviewHelpful
from storefront.shared.errors import NotFound

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/product/{product_id}")
async def product_reviews(
    product_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    if current_domain.repository_for(Product).find_active(product_id) is None:
        raise NotFound("Product not found")

    reviews = current_domain.repository_for(Review).approved_for_product(product_id)
    stats = statistics_for(reviews)
    page_items, pagination = paginate(reviews, page, limit)
    return {
        "success": True,
        "data": [review_to_dict(review) for review in page_items],
        "pagination": pagination,
        "statistics": {
            "averageRating": stats.average,
            "totalReviews": stats.total,
            "ratingDistribution": {str(star): count for star, count in stats.distribution.items()},
        },
    }


@router.post("/product/{product_id}", status_code=201)
async def submit_review(
    product_id: str,
    body: CreateReviewRequest,
    principal: Principal | None = Depends(optional_principal),
):
    review_id = current_domain.process(
        SubmitReview(
            product_id=product_id,
            user_id=principal.id if principal else None,
            reviewer_name=body.reviewer_name or (principal.name if principal else None),
            reviewer_email=body.reviewer_email or (principal.email if principal else None),
            rating=body.rating,
            title=body.title,
            comment=body.comment,
        ),
        asynchronous=False,
    )
    return {
        "success": True,
        "message": "Review submitted successfully",
        "data": review_to_dict(load_review(review_id)),
    }


@router.put("/{review_id}")
async def edit_review(
    review_id: str,
    body: UpdateReviewRequest,
    principal: Principal = Depends(current_principal),
):
    current_domain.process(
        EditReview(
            review_id=review_id,
            actor_id=principal.id,
            actor_is_admin=principal.is_admin,
            rating=body.rating,
            title=body.title,
            comment=body.comment,
        ),
        asynchronous=False,
    )
    return {
        "success": True,
        "message": "Review updated successfully",
        "data": review_to_dict(load_review(review_id)),
    }


@router.delete("/{review_id}")
async def delete_review(review_id: str, principal: Principal = Depends(current_principal)):
    current_domain.process(
        RemoveReview(review_id=review_id, actor_id=principal.id, actor_is_admin=principal.is_admin),
        asynchronous=False,
    )
    return {"success": True, "message": "Review deleted successfully"}


@router.get("")
async def all_reviews(
    approved: bool | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    _: Principal = Depends(admin_principal),
):
    reviews = current_domain.repository_for(Review).listing(approved)
    page_items, pagination = paginate(reviews, page, limit)

    products = current_domain.repository_for(Product)
    data = [
        review_to_dict(review, products._dao.query.filter(id=str(review.product_id)).all().first)
        for review in page_items
    ]
    return {"success": True, "data": data, "pagination": pagination}


@router.put("/{review_id}/approve")
async def approve_review(
    review_id: str,
    body: ApproveReviewRequest,
    _: Principal = Depends(admin_principal),
):
    current_domain.process(ModerateReview(review_id=review_id, is_approved=body.is_approved), asynchronous=False)
    verdict = "approved" if body.is_approved else "disapproved"
    return {
        "success": True,
        "message": f"Review {verdict} successfully",
        "data": review_to_dict(load_review(review_id)),
    }


@router.post("/{review_id}/helpful")
async def mark_helpful(review_id: str):
    votes = current_domain.process(MarkReviewHelpful(review_id=review_id), asynchronous=False)
    return {"success": True, "message": "Marked as helpful", "data": {"helpfulVotes": votes}}
