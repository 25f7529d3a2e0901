from src.sh_catalog.domain.models import Product
from src.sh_common.errors import ProductNotFoundError, ProductNotNegotiableError


def check_product_negotiable(product: Product | None, product_id: str) -> Product:
    """Raise 404 for a missing product, 403 for a fixed-price one; return the product."""
    if product is None:
        raise ProductNotFoundError(product_id)
    if product.negotiable is False:
        raise ProductNotNegotiableError(product_id)
    return product
