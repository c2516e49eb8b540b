"""Admin catalog management: create, edit and delete products, plus catalog reads."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import _UNSET, Product
from storefront.domain import storefront
from storefront.exceptions import NotAuthorized
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    price: Float(required=True)
    description: Text()
    category: String(max_length=100)
    image_url: String(max_length=500)
    stock: Integer(default=0)
    featured: Boolean(default=False)
    discount: Float(default=0.0)
    actor_role: String(required=True)


@storefront.command(part_of="Product")
class UpdateProduct:
    """Partial update; fields left as None are not touched."""

    product_id: Identifier(required=True)
    name: String(max_length=255)
    price: Float()
    description: Text()
    category: String(max_length=100)
    image_url: String(max_length=500)
    stock: Integer()
    featured: Boolean()
    discount: Float()
    actor_role: String(required=True)


@storefront.command(part_of="Product")
class DeleteProduct:
    """Remove a product from the catalog. Orders keep their item snapshots."""

    product_id: Identifier(required=True)
    actor_role: String(required=True)


def _require_admin(role):
    if (role or "").lower() != "admin":
        raise NotAuthorized("Only administrators can manage products")


@storefront.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        _require_admin(command.actor_role)

        product = Product.create(
            name=command.name,
            price=command.price,
            description=command.description,
            category=command.category,
            image_url=command.image_url,
            stock=command.stock or 0,
            featured=bool(command.featured),
            discount=command.discount or 0.0,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("Product created", product_id=str(product.id), stock=product.stock)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        _require_admin(command.actor_role)

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        product.update(
            name=command.name if command.name is not None else _UNSET,
            price=command.price if command.price is not None else _UNSET,
            description=command.description if command.description is not None else _UNSET,
            category=command.category if command.category is not None else _UNSET,
            image_url=command.image_url if command.image_url is not None else _UNSET,
            stock=command.stock if command.stock is not None else _UNSET,
            featured=command.featured if command.featured is not None else _UNSET,
            discount=command.discount if command.discount is not None else _UNSET,
        )
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        _require_admin(command.actor_role)

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)

        logger.info("Product deleted", product_id=str(product.id), name=product.name)


def list_products(category=None, offset=0, limit=100):
    query = current_domain.repository_for(Product)._dao.query
    if category:
        query = query.filter(category=category)
    return query.order_by("-created_at").offset(offset).limit(limit).all().items


def get_product(product_id):
    return current_domain.repository_for(Product).get(product_id)
