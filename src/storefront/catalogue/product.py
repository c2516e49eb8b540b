"""Product aggregate: catalog entry, stock level and customer ratings.

Stock is changed only through ``decrement_stock`` and ``restore_stock``.
Order placement is the sole caller of the former; the latter compensates a
placement that failed after stock had been taken.

Ratings are one per user. Every change recomputes the average from the full
set of ratings rather than adjusting it incrementally.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.catalogue.events import (
    ProductCreated,
    ProductRated,
    ProductUpdated,
    StockDecremented,
    StockRestored,
)
from storefront.domain import storefront
from storefront.exceptions import InsufficientStock

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

_UPDATABLE_FIELDS = ("name", "description", "price", "category", "image_url", "stock", "featured", "discount")


@storefront.entity(part_of="Product")
class Rating:
    """One user's star rating, with optional review text."""

    user_id: Identifier(required=True)
    stars: Integer(required=True, min_value=1, max_value=5)
    review: Text()
    created_at: DateTime()


@storefront.aggregate
class Product:
    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    category: String(max_length=100, default="Uncategorized")
    image_url: String(max_length=500)
    stock: Integer(default=0)
    featured: Boolean(default=False)
    discount: Float(default=0.0, min_value=0.0, max_value=100.0)

    ratings: HasMany(Rating)
    average_rating: Float(default=0.0)
    total_ratings: Integer(default=0)

    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @classmethod
    def create(
        cls,
        name,
        price,
        description=None,
        category=None,
        image_url=None,
        stock=0,
        featured=False,
        discount=0.0,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            price=price,
            description=description,
            category=category or "Uncategorized",
            image_url=image_url,
            stock=stock,
            featured=featured,
            discount=discount,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                price=price,
                category=product.category,
                stock=stock,
                created_at=now,
            )
        )
        return product

    def update(self, **changes):
        unknown = set(changes) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError({"product": [f"Unknown fields: {', '.join(sorted(unknown))}"]})

        applied = {field: value for field, value in changes.items() if value is not _UNSET}
        if not applied:
            return

        for field, value in applied.items():
            setattr(self, field, value)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                changed_fields=",".join(sorted(applied)),
                updated_at=self.updated_at,
            )
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def decrement_stock(self, quantity, order_id=None):
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})
        if quantity > self.stock:
            raise InsufficientStock(self.name, quantity, self.stock)

        self.stock = self.stock - quantity
        self.raise_(
            StockDecremented(
                product_id=self.id,
                quantity=quantity,
                remaining=self.stock,
                order_id=order_id,
            )
        )

    def restore_stock(self, quantity, reason=None):
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})

        self.stock = self.stock + quantity
        self.raise_(
            StockRestored(
                product_id=self.id,
                quantity=quantity,
                remaining=self.stock,
                reason=reason,
            )
        )

    # -------------------------------------------------------------------
    # Ratings
    # -------------------------------------------------------------------
    def rating_by(self, user_id):
        return next((r for r in self.ratings if str(r.user_id) == str(user_id)), None)

    def rate(self, user_id, stars, review=None):
        """Record ``user_id``'s rating, replacing any earlier one."""
        if stars is None or not 1 <= stars <= 5:
            raise ValidationError({"stars": ["Rating must be between 1 and 5"]})

        now = datetime.now(UTC)
        existing = self.rating_by(user_id)
        if existing is None:
            rating = Rating(user_id=user_id, stars=stars, review=review, created_at=now)
            self.add_ratings(rating)
        else:
            existing.stars = stars
            existing.review = review
            existing.created_at = now
            rating = existing

        self.recalculate_ratings()
        self.raise_(
            ProductRated(
                product_id=self.id,
                user_id=user_id,
                stars=stars,
                average_rating=self.average_rating,
                total_ratings=self.total_ratings,
                rated_at=now,
            )
        )
        return rating

    def recalculate_ratings(self):
        stars = [r.stars for r in self.ratings]
        self.total_ratings = len(stars)
        self.average_rating = round(sum(stars) / len(stars), 2) if stars else 0.0
