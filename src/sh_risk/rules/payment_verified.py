from src.sh_common.errors import PaymentNotVerifiedError


def check_payment_verified(payment_verified: bool) -> None:
    if not payment_verified:
        raise PaymentNotVerifiedError()
