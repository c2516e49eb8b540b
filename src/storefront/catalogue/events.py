"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalog."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    category: String()
    stock: Integer()
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    changed_fields: String()  # Comma-separated field names
    updated_at: DateTime(required=True)


@storefront.event(part_of="Product")
class StockDecremented:
    """Stock was taken for an order."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
    order_id: Identifier()


@storefront.event(part_of="Product")
class StockRestored:
    """Stock was given back after an order placement failed."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
    reason: String()


@storefront.event(part_of="Product")
class ProductRated:
    __version__ = 1

    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    stars: Integer(required=True)
    average_rating: Float(required=True)
    total_ratings: Integer(required=True)
    rated_at: DateTime(required=True)
