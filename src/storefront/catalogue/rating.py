"""RateProduct: customers rate products they have received.

A rating must be backed by a delivered order. Each order item can back at
most one rating; once it has been used the item is marked ``rated``. A
customer who bought the same product on two delivered orders may therefore
rate twice, the second rating replacing the first on the product.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.exceptions import AlreadyRated, NotEligibleToRate
from storefront.ordering.order import Order, OrderStatus
from storefront.utils.logging import get_logger
from storefront.utils.queries import fetch_all

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class RateProduct:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    stars: Integer(required=True)
    review: Text()


def _rateable_item(user_id, product_id):
    """Return ``(order, item)`` for the oldest unrated delivered item of ``product_id``."""
    delivered = fetch_all(Order, order_by="created_at", user_id=str(user_id), status=OrderStatus.DELIVERED.value)

    seen_rated = False
    for order in delivered:
        for item in order.items_for(product_id):
            if not item.rated:
                return order, item
            seen_rated = True

    if seen_rated:
        raise AlreadyRated("You have already rated this product")
    raise NotEligibleToRate("You can only rate products from delivered orders")


@storefront.command_handler(part_of=Product)
class RateProductHandler:
    @handle(RateProduct)
    def rate_product(self, command):
        product_repo = current_domain.repository_for(Product)
        product = product_repo.get(command.product_id)

        if command.stars is None or not 1 <= command.stars <= 5:
            raise ValidationError({"stars": ["Rating must be between 1 and 5"]})

        order, item = _rateable_item(command.user_id, command.product_id)

        product.rate(command.user_id, command.stars, command.review)
        product_repo.add(product)

        order.mark_item_rated(item.id)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Product rated",
            product_id=str(product.id),
            order_id=str(order.id),
            stars=command.stars,
            average_rating=product.average_rating,
        )
        return {
            "average_rating": product.average_rating,
            "total_ratings": product.total_ratings,
            "user_rating": command.stars,
        }


def rate_product(product_id, user_id, stars, review=None):
    command = RateProduct(product_id=product_id, user_id=user_id, stars=stars, review=review)
    return current_domain.process(command, asynchronous=False)


def ratings_for(product_id):
    """A product's ratings, newest first, with its average and count."""
    product = current_domain.repository_for(Product).get(product_id)
    ratings = sorted(product.ratings, key=lambda r: r.created_at, reverse=True)
    return product, ratings


def recalculate_all_ratings():
    """Recompute every product's average and count from its stored ratings.

    Returns the number of products whose figures changed.
    """
    repo = current_domain.repository_for(Product)
    changed = 0
    for product in fetch_all(Product):
        before = (product.average_rating, product.total_ratings)
        product.recalculate_ratings()
        if (product.average_rating, product.total_ratings) != before:
            repo.add(product)
            changed += 1
            logger.info(
                "Product ratings recalculated",
                product_id=str(product.id),
                average_rating=product.average_rating,
                total_ratings=product.total_ratings,
            )
    return changed
