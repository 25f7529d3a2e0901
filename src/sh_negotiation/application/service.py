"""NegotiationService — offer admission, lifecycle transitions and the directory.

Each write commits on success and rolls back + re-raises on any error.
Realtime events are published only after commit and never affect the result.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sh_account.application.service import EligibilityService
from src.sh_catalog.domain.repository import ProductRepositoryProtocol
from src.sh_catalog.infrastructure.persistence import ProductRepository
from src.sh_common.enums import MessageType, NegotiationStatus
from src.sh_common.errors import (
    AppError,
    ConversationNotFoundError,
    NegotiationForbiddenError,
    NegotiationNotFoundError,
    OfferNotPendingError,
    ProductNotFoundError,
)
from src.sh_common.id_generator import generate_id
from src.sh_common.money import cents_to_display, units_to_cents
from src.sh_negotiation.application.schemas import (
    ChatMessageResponse,
    NegotiationListResponse,
    NegotiationResponse,
    PaginationResponse,
)
from src.sh_negotiation.domain.events import (
    NEW_MESSAGE,
    OFFER_CREATED,
    OFFER_UPDATED,
    NegotiationNotifier,
)
from src.sh_negotiation.domain.models import Actor, Negotiation
from src.sh_negotiation.domain.repository import NegotiationRepositoryProtocol
from src.sh_negotiation.domain.state_machine import (
    action_for_status,
    can_decide,
    next_status,
)
from src.sh_negotiation.infrastructure.persistence import NegotiationRepository
from src.sh_pricing.domain.policy import PricingPolicy, resolve_min_offer
from src.sh_risk.rules.offer_floor import check_offer_floor
from src.sh_risk.rules.order_history import check_order_history
from src.sh_risk.rules.payment_verified import check_payment_verified
from src.sh_risk.rules.product_negotiable import check_product_negotiable
from src.sh_risk.rules.self_negotiation import (
    check_not_self_negotiation,
    is_self_negotiation,
)

logger = logging.getLogger("sh.negotiation")


class NegotiationService:
    def __init__(
        self,
        repo: NegotiationRepositoryProtocol | None = None,
        product_repo: ProductRepositoryProtocol | None = None,
        eligibility: EligibilityService | None = None,
        notifier: NegotiationNotifier | None = None,
        min_orders: int | None = None,
        max_discount_cents: int | None = None,
    ) -> None:
        self._repo: NegotiationRepositoryProtocol = repo or NegotiationRepository()
        self._products: ProductRepositoryProtocol = product_repo or ProductRepository()
        self._eligibility = eligibility or EligibilityService()
        self._notifier = notifier
        self._min_orders = settings.NEGOTIATION_MIN_ORDERS if min_orders is None else min_orders
        self._max_discount_cents = (
            units_to_cents(settings.MAX_NEGOTIATION_DISCOUNT)
            if max_discount_cents is None
            else max_discount_cents
        )

    # ------------------------------------------------------------------
    # Offer admission
    # ------------------------------------------------------------------

    async def submit_offer(
        self,
        db: AsyncSession,
        buyer: Actor,
        product_id: str,
        proposed_cents: int,
        message: str | None = None,
    ) -> NegotiationResponse:
        """Run the admission checks in order and persist a pending offer.

        Nothing is written unless every check passes; the first failing
        check determines the error.
        """
        try:
            product = check_product_negotiable(
                await self._products.get_product(db, product_id), product_id
            )
            check_not_self_negotiation(buyer.id, product.vendor_id)

            eligibility = await self._eligibility.snapshot(db, buyer.id)
            check_order_history(eligibility.past_delivered_orders, self._min_orders)
            check_payment_verified(eligibility.payment_verified)

            floor = resolve_min_offer(
                PricingPolicy.for_product(product, self._max_discount_cents), eligibility
            )
            check_offer_floor(proposed_cents, floor)

            offer = Negotiation(
                id=generate_id(),
                product_id=product.id,
                buyer_id=buyer.id,
                seller_id=product.vendor_id,
                sender_id=buyer.id,
                type=MessageType.OFFER.value,
                status=NegotiationStatus.PENDING.value,
                amount_cents=proposed_cents,
                message=message or f"Offer: {cents_to_display(proposed_cents)}",
            )
            saved = await self._repo.save(offer, db)
            await db.commit()
        except AppError as exc:
            await db.rollback()
            logger.info(
                "Offer refused product=%s buyer=%s code=%d: %s",
                product_id, buyer.id, exc.code, exc.message,
            )
            raise
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Offer admitted id=%s product=%s buyer=%s amount=%d floor=%d",
            saved.id, saved.product_id, saved.buyer_id,
            proposed_cents, floor.min_allowed_cents,
        )
        response = NegotiationResponse.from_domain(saved)
        await self._publish_offer(saved, OFFER_CREATED, response)
        return response

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def decide(
        self, db: AsyncSession, actor: Actor, negotiation_id: str, action: str
    ) -> Negotiation:
        """Apply ``action`` to a pending offer without committing.

        The status change is a conditional update on ``status = pending``;
        if another decider got there first no row matches and the offer is
        reported as no longer pending.
        """
        current = await self._repo.get_by_id(negotiation_id, db)
        if current is None:
            raise NegotiationNotFoundError(negotiation_id)
        target = next_status(current, actor, action)

        updated = await self._repo.compare_and_set_status(
            negotiation_id, current.status, target, db
        )
        if updated is None:
            latest = await self._repo.get_by_id(negotiation_id, db)
            raise OfferNotPendingError(
                negotiation_id, latest.status if latest else current.status
            )
        return updated

    async def transition(
        self, db: AsyncSession, actor: Actor, negotiation_id: str, action: str
    ) -> NegotiationResponse:
        try:
            updated = await self.decide(db, actor, negotiation_id, action)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Offer %s -> %s by %s (%s)", updated.id, updated.status, actor.id, actor.role
        )
        response = NegotiationResponse.from_domain(updated)
        await self.publish_update(updated, response)
        return response

    async def update_status(
        self, db: AsyncSession, actor: Actor, negotiation_id: str, status: str
    ) -> NegotiationResponse:
        """``PUT …/status``: existence and authorization are checked before the status value."""
        current = await self._repo.get_by_id(negotiation_id, db)
        if current is None:
            raise NegotiationNotFoundError(negotiation_id)
        if not can_decide(actor, current):
            raise NegotiationForbiddenError(negotiation_id)
        return await self.transition(db, actor, negotiation_id, action_for_status(status))

    # ------------------------------------------------------------------
    # Directory
    # ------------------------------------------------------------------

    async def get_negotiation(
        self, db: AsyncSession, actor: Actor, negotiation_id: str
    ) -> NegotiationResponse:
        negotiation = await self._repo.get_by_id(negotiation_id, db)
        if negotiation is None:
            raise NegotiationNotFoundError(negotiation_id)
        if not actor.is_admin and not negotiation.involves(actor.id):
            raise NegotiationForbiddenError(negotiation_id)
        return NegotiationResponse.from_domain(negotiation)

    async def list_negotiations(
        self,
        db: AsyncSession,
        actor: Actor,
        status: str | None,
        page: int,
        limit: int,
    ) -> NegotiationListResponse:
        # Vendors see offers on their listings; everyone else sees their own.
        if actor.is_vendor:
            buyer_id, seller_id = None, actor.id
        else:
            buyer_id, seller_id = actor.id, None
        return await self._list_page(db, buyer_id, seller_id, None, status, page, limit)

    async def list_offers(
        self, db: AsyncSession, status: str | None, page: int, limit: int
    ) -> NegotiationListResponse:
        """Platform-wide offer listing for the admin directory."""
        return await self._list_page(
            db, None, None, MessageType.OFFER.value, status, page, limit
        )

    async def _list_page(
        self,
        db: AsyncSession,
        buyer_id: str | None,
        seller_id: str | None,
        message_type: str | None,
        status: str | None,
        page: int,
        limit: int,
    ) -> NegotiationListResponse:
        result = await self._repo.list_page(
            buyer_id=buyer_id,
            seller_id=seller_id,
            message_type=message_type,
            status=status,
            offset=(page - 1) * limit,
            limit=limit,
            db=db,
        )
        return NegotiationListResponse(
            negotiations=[NegotiationResponse.from_domain(n) for n in result.items],
            pagination=PaginationResponse.build(page, limit, result.total, len(result.items)),
        )

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    async def send_message(
        self,
        db: AsyncSession,
        sender: Actor,
        product_id: str,
        message: str,
        recipient_id: str | None = None,
    ) -> ChatMessageResponse:
        """Store a plain text message between a buyer and the product's vendor.

        A vendor replying on their own listing names the buyer in
        ``recipient_id``; without it the message would be to themselves.
        The buyer must already have a thread with the vendor on this product.
        """
        try:
            product = await self._products.get_product(db, product_id)
            if product is None:
                raise ProductNotFoundError(product_id)

            buyer_id = sender.id
            if recipient_id and is_self_negotiation(sender.id, product.vendor_id):
                buyer_id = recipient_id
            vendor_reply = buyer_id != sender.id
            check_not_self_negotiation(buyer_id, product.vendor_id)
            # vendors reply to existing threads only
            if vendor_reply and not await self._repo.has_conversation(
                product.id, buyer_id, product.vendor_id, db
            ):
                raise ConversationNotFoundError(product.id, buyer_id)

            saved = await self._repo.save(
                Negotiation(
                    id=generate_id(),
                    product_id=product.id,
                    buyer_id=buyer_id,
                    seller_id=product.vendor_id,
                    sender_id=sender.id,
                    type=MessageType.TEXT.value,
                    status=NegotiationStatus.NONE.value,
                    message=message,
                ),
                db,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        response = ChatMessageResponse.from_domain(saved)
        if self._notifier is not None:
            await self._notifier.notify_product_room(
                saved.product_id, NEW_MESSAGE, response.model_dump()
            )
        return response

    async def list_conversation(
        self,
        db: AsyncSession,
        actor: Actor,
        product_id: str,
        with_user: str | None = None,
    ) -> list[ChatMessageResponse]:
        product = await self._products.get_product(db, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        counterpart = (
            with_user
            if with_user and is_self_negotiation(actor.id, product.vendor_id)
            else product.vendor_id
        )
        messages = await self._repo.list_conversation(product.id, actor.id, counterpart, db)
        return [ChatMessageResponse.from_domain(m) for m in messages]

    # ------------------------------------------------------------------
    # Realtime
    # ------------------------------------------------------------------

    async def publish_update(self, negotiation: Negotiation, response: NegotiationResponse) -> None:
        await self._publish_offer(negotiation, OFFER_UPDATED, response)

    async def _publish_offer(
        self, negotiation: Negotiation, event: str, response: NegotiationResponse
    ) -> None:
        if self._notifier is None:
            return
        payload = response.model_dump()
        await self._notifier.notify_product_room(negotiation.product_id, event, payload)
        recipient = (
            negotiation.seller_id if event == OFFER_CREATED else negotiation.buyer_id
        )
        await self._notifier.notify_user(recipient, event, payload)
