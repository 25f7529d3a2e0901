from src.sh_common.errors import InsufficientOrderHistoryError


def check_order_history(delivered_orders: int, min_orders_required: int) -> None:
    """Raise 403 unless the buyer has at least ``min_orders_required`` delivered orders."""
    if delivered_orders < min_orders_required:
        raise InsufficientOrderHistoryError(min_orders_required, delivered_orders)
